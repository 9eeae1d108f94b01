from enum import Enum


class ValueKind(Enum):
    """
    Scalar kinds usable as Flux literals (e.g. in a `contains()` stage).
    """

    Bool = "bool"
    Integer = "integer"
    UInteger = "uinteger"
    Float = "float"
    String = "string"
    Time = "time"  # Plain epoch integer; the unit is a caller convention.
