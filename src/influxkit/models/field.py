"""
Field Values.

This module defines [`Field`][influxkit.models.field.Field], the closed sum
type of values a line-protocol point can carry, together with the
conversions from native Python, numpy and pyarrow scalars.

Every numeric width maps onto one of the five kinds:

| Source | Kind |
| --- | --- |
| `bool`, `numpy.bool_`, `pa.bool_()` | `Bool` |
| `int`, `numpy.int8` ... `numpy.int64`, `pa.int8()` ... `pa.int64()` | `Integer` |
| `numpy.uint8` ... `numpy.uint64`, `pa.uint8()` ... `pa.uint64()` | `UInteger` |
| `float`, `numpy.float16` ... `numpy.float64`, `pa.float16()` ... `pa.float64()` | `Float` |
| `str`, `numpy.str_`, `pa.string()`, `pa.large_string()` | `String` |
"""

import math
from typing import Any, Union

import numpy as np
import pyarrow as pa
from pydantic import ConfigDict, model_validator

from ..enum import FieldKind
from ..helpers import ensure_single_line, escape_string_field
from .base_model import BaseModel

INTEGER_MIN = -(2**127)
INTEGER_MAX = 2**127 - 1
UINTEGER_MAX = 2**128 - 1

# numpy dtype.kind -> field kind
_NUMPY_KINDS = {
    "b": FieldKind.Bool,
    "i": FieldKind.Integer,
    "u": FieldKind.UInteger,
    "f": FieldKind.Float,
    "U": FieldKind.String,
}

_ARROW_KINDS = (
    (pa.types.is_boolean, FieldKind.Bool),
    (pa.types.is_signed_integer, FieldKind.Integer),
    (pa.types.is_unsigned_integer, FieldKind.UInteger),
    (pa.types.is_floating, FieldKind.Float),
    (pa.types.is_string, FieldKind.String),
    (pa.types.is_large_string, FieldKind.String),
)

_CASTS = {
    FieldKind.Bool: bool,
    FieldKind.Integer: int,
    FieldKind.UInteger: int,
    FieldKind.Float: float,
    FieldKind.String: str,
}


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_value(kind: FieldKind, value: Any) -> Any:
    """Validates `value` against `kind` and returns its canonical form."""
    if kind is FieldKind.Float:
        if not (_is_integer(value) or isinstance(value, float)):
            raise ValueError(f"Float field expects a number, got {type(value).__name__}")
        try:
            value = float(value)
        except OverflowError:
            raise ValueError(f"Float field out of the 64-bit range: {value}")
        if not math.isfinite(value):
            raise ValueError(f"Float field must be finite, got {value}")
    elif kind is FieldKind.Integer:
        if not _is_integer(value):
            raise ValueError(f"Integer field expects an int, got {type(value).__name__}")
        if not (INTEGER_MIN <= value <= INTEGER_MAX):
            raise ValueError(f"Integer field out of the signed 128-bit range: {value}")
    elif kind is FieldKind.UInteger:
        if not _is_integer(value):
            raise ValueError(f"UInteger field expects an int, got {type(value).__name__}")
        if not (0 <= value <= UINTEGER_MAX):
            raise ValueError(f"UInteger field out of the unsigned 128-bit range: {value}")
    elif kind is FieldKind.Bool:
        if not isinstance(value, bool):
            raise ValueError(f"Bool field expects a bool, got {type(value).__name__}")
    elif kind is FieldKind.String:
        if not isinstance(value, str):
            raise ValueError(f"String field expects a str, got {type(value).__name__}")
        ensure_single_line(value, "String field")
    return value


class Field(BaseModel):
    """
    A typed line-protocol field value.

    A `Field` is immutable. Build one with the explicit per-kind constructors
    or let [`from_value()`][influxkit.models.field.Field.from_value] pick the
    kind from a native value.

    Attributes:
        kind: The [`FieldKind`][influxkit.enum.FieldKind] of the value.
        value: The canonical Python value (`float`, `str`, `bool` or `int`).

    Example:
        ```python
        from influxkit import Field

        Field.from_integer(-100).to_line_protocol()   # '-100i'
        Field.from_uinteger(100).to_line_protocol()   # '100u'
        Field.from_value(10.123).to_line_protocol()   # '10.123'
        ```
    """

    model_config = ConfigDict(frozen=True)

    kind: FieldKind
    value: Union[bool, int, float, str]

    @model_validator(mode="before")
    @classmethod
    def _validate_value(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "kind" not in data or "value" not in data:
            return data
        try:
            kind = FieldKind(data["kind"])
        except ValueError:
            # let pydantic report the invalid enum member
            return data
        return {**data, "kind": kind, "value": _check_value(kind, data["value"])}

    @classmethod
    def from_float(cls, value: float) -> "Field":
        return cls(kind=FieldKind.Float, value=value)

    @classmethod
    def from_string(cls, value: str) -> "Field":
        return cls(kind=FieldKind.String, value=value)

    @classmethod
    def from_bool(cls, value: bool) -> "Field":
        return cls(kind=FieldKind.Bool, value=value)

    @classmethod
    def from_integer(cls, value: int) -> "Field":
        return cls(kind=FieldKind.Integer, value=value)

    @classmethod
    def from_uinteger(cls, value: int) -> "Field":
        return cls(kind=FieldKind.UInteger, value=value)

    @classmethod
    def from_value(cls, value: Any) -> "Field":
        """
        Converts a native scalar into a `Field`.

        Python `int` values are always signed (`Integer`); use
        [`from_uinteger()`][influxkit.models.field.Field.from_uinteger] or an
        unsigned numpy/pyarrow scalar to obtain a `UInteger`.

        Args:
            value: A `Field`, a Python `bool`/`int`/`float`/`str`, a numpy
                scalar or a pyarrow scalar.

        Returns:
            The corresponding `Field`.

        Raises:
            TypeError: If the value type has no field kind.
            ValueError: If the value is null or out of range for its kind.
        """
        if isinstance(value, Field):
            return value
        if isinstance(value, pa.Scalar):
            return cls._from_arrow_scalar(value)
        if isinstance(value, np.generic):
            kind = _NUMPY_KINDS.get(value.dtype.kind)
            if kind is None:
                raise TypeError(f"Unsupported numpy scalar type '{value.dtype}' for a field")
            return cls(kind=kind, value=_CASTS[kind](value.item()))
        if isinstance(value, bool):
            return cls.from_bool(value)
        if isinstance(value, int):
            return cls.from_integer(value)
        if isinstance(value, float):
            return cls.from_float(value)
        if isinstance(value, str):
            return cls.from_string(value)
        raise TypeError(f"Unsupported type '{type(value).__name__}' for a field value")

    @classmethod
    def _from_arrow_scalar(cls, scalar: pa.Scalar) -> "Field":
        if not scalar.is_valid:
            raise ValueError(f"Cannot build a field from a null '{scalar.type}' scalar")
        for predicate, kind in _ARROW_KINDS:
            if predicate(scalar.type):
                return cls(kind=kind, value=_CASTS[kind](scalar.as_py()))
        raise TypeError(f"Unsupported arrow type '{scalar.type}' for a field")

    def to_line_protocol(self) -> str:
        """Renders the value as it appears on the right of `key=` in a line."""
        if self.kind is FieldKind.Float:
            # shortest round-trip form, no exponent, no trailing '.0'
            return np.format_float_positional(self.value, trim="-")
        if self.kind is FieldKind.String:
            return f'"{escape_string_field(self.value)}"'
        if self.kind is FieldKind.Bool:
            return "true" if self.value else "false"
        if self.kind is FieldKind.Integer:
            return f"{self.value}i"
        return f"{self.value}u"

    def __str__(self) -> str:
        return self.to_line_protocol()
