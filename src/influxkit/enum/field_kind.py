from enum import Enum


class FieldKind(Enum):
    """
    The closed set of value kinds a line-protocol field can carry.
    """

    Float = "float"  # 64-bit floating point, rendered without suffix.
    String = "string"  # Double quoted text.
    Bool = "bool"  # Literal `true` / `false`.
    Integer = "integer"  # Signed 128-bit range, rendered with an `i` suffix.
    UInteger = "uinteger"  # Unsigned 128-bit range, rendered with a `u` suffix.
