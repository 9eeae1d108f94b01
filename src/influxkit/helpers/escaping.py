"""
Line Protocol Escaping Utilities.

Provides the escaping rules applied to each lexical element of a
line-protocol line, plus the guard that keeps every rendered line free of
line breaks (batches are newline-joined, so an embedded break would split a
point in two).
"""

# Replacement tables, applied in order
_TAG_ESCAPES = ((",", "\\,"), ("=", "\\="), (" ", "\\ "))
_MEASUREMENT_ESCAPES = ((",", "\\,"), (" ", "\\ "))
_STRING_FIELD_ESCAPES = (("\\", "\\\\"), ('"', '\\"'))

_LINE_BREAKS = ("\n", "\r")


def _apply(value: str, escapes) -> str:
    for char, replacement in escapes:
        value = value.replace(char, replacement)
    return value


def escape_tag_value(value: str) -> str:
    """
    Escapes a tag value: comma, then equals sign, then space.

    None of the three replacements introduces a new occurrence of the others,
    so the result never contains over-escaped sequences.

    Example:
        `escape_tag_value("KHTML, like Gecko") == "KHTML\\,\\ like\\ Gecko"`
    """
    return _apply(value, _TAG_ESCAPES)


def escape_key(key: str) -> str:
    """Escapes a tag key or field key (same rules as tag values)."""
    return _apply(key, _TAG_ESCAPES)


def escape_measurement(name: str) -> str:
    """Escapes a measurement name: comma and space."""
    return _apply(name, _MEASUREMENT_ESCAPES)


def escape_string_field(value: str) -> str:
    """Escapes the content of a string field: backslash, then double quote."""
    return _apply(value, _STRING_FIELD_ESCAPES)


def ensure_single_line(value: str, what: str) -> str:
    """
    Rejects text that contains a line break.

    Args:
        value: The text to check.
        what: A short description of the element, used in the error message.

    Returns:
        The unchanged `value`.

    Raises:
        ValueError: If `value` contains `\\n` or `\\r`.
    """
    if any(brk in value for brk in _LINE_BREAKS):
        raise ValueError(f"{what} must not contain line breaks, got {value!r}")
    return value
