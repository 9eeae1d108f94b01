from .escaping import (
    escape_tag_value as escape_tag_value,
    escape_key as escape_key,
    escape_measurement as escape_measurement,
    escape_string_field as escape_string_field,
    ensure_single_line as ensure_single_line,
)
