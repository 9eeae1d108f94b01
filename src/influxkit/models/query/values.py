"""
Flux scalar literals.

[`TypeValue`][influxkit.models.query.values.TypeValue] is the scalar used by
stages that embed literal values in the query text, such as
[`Contains`][influxkit.models.query.stages.Contains].
"""

import math
from datetime import datetime
from typing import Any, Union

import numpy as np
from pydantic import ConfigDict, model_validator

from ...enum import ValueKind
from ..base_model import BaseModel
from ..time import Time

_NUMPY_KINDS = {
    "b": ValueKind.Bool,
    "i": ValueKind.Integer,
    "u": ValueKind.UInteger,
    "f": ValueKind.Float,
    "U": ValueKind.String,
}


def quote(value: str) -> str:
    """Renders a Flux string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _check_value(kind: ValueKind, value: Any) -> Any:
    is_int = isinstance(value, int) and not isinstance(value, bool)
    if kind is ValueKind.Bool:
        if not isinstance(value, bool):
            raise ValueError(f"Bool value expects a bool, got {type(value).__name__}")
    elif kind in (ValueKind.Integer, ValueKind.Time):
        if not is_int:
            raise ValueError(f"{kind.name} value expects an int, got {type(value).__name__}")
    elif kind is ValueKind.UInteger:
        if not is_int or value < 0:
            raise ValueError(f"UInteger value expects a non-negative int, got {value!r}")
    elif kind is ValueKind.Float:
        if not (is_int or isinstance(value, float)):
            raise ValueError(f"Float value expects a number, got {type(value).__name__}")
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Float value must be finite, got {value}")
    elif kind is ValueKind.String:
        if not isinstance(value, str):
            raise ValueError(f"String value expects a str, got {type(value).__name__}")
    return value


class TypeValue(BaseModel):
    """
    A typed scalar rendered as a Flux literal.

    | Kind | Rendering |
    | --- | --- |
    | `Bool` | `true` / `false` |
    | `Integer`, `UInteger`, `Time` | decimal digits |
    | `Float` | decimal with a fractional part (`1.0`, `10.123`) |
    | `String` | double quoted |
    """

    model_config = ConfigDict(frozen=True)

    kind: ValueKind
    value: Union[bool, int, float, str]

    @model_validator(mode="before")
    @classmethod
    def _validate_value(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "kind" not in data or "value" not in data:
            return data
        try:
            kind = ValueKind(data["kind"])
        except ValueError:
            return data
        return {**data, "kind": kind, "value": _check_value(kind, data["value"])}

    @classmethod
    def from_bool(cls, value: bool) -> "TypeValue":
        return cls(kind=ValueKind.Bool, value=value)

    @classmethod
    def from_integer(cls, value: int) -> "TypeValue":
        return cls(kind=ValueKind.Integer, value=value)

    @classmethod
    def from_uinteger(cls, value: int) -> "TypeValue":
        return cls(kind=ValueKind.UInteger, value=value)

    @classmethod
    def from_float(cls, value: float) -> "TypeValue":
        return cls(kind=ValueKind.Float, value=value)

    @classmethod
    def from_string(cls, value: str) -> "TypeValue":
        return cls(kind=ValueKind.String, value=value)

    @classmethod
    def from_time(cls, value: int) -> "TypeValue":
        """A plain epoch integer; the unit is up to the caller."""
        return cls(kind=ValueKind.Time, value=value)

    @classmethod
    def from_value(cls, value: Any) -> "TypeValue":
        """
        Converts a native scalar into a `TypeValue`.

        `datetime` and [`Time`][influxkit.models.time.Time] values become `Time`
        scalars in milliseconds since the epoch.

        Raises:
            TypeError: If the value type has no Flux scalar kind.
        """
        if isinstance(value, TypeValue):
            return value
        if isinstance(value, datetime):
            value = Time.from_datetime(value)
        if isinstance(value, Time):
            return cls.from_time(value.to_milliseconds())
        if isinstance(value, np.generic):
            kind = _NUMPY_KINDS.get(value.dtype.kind)
            if kind is None:
                raise TypeError(f"Unsupported numpy scalar type '{value.dtype}' for a Flux value")
            return cls(kind=kind, value=value.item())
        if isinstance(value, bool):
            return cls.from_bool(value)
        if isinstance(value, int):
            return cls.from_integer(value)
        if isinstance(value, float):
            return cls.from_float(value)
        if isinstance(value, str):
            return cls.from_string(value)
        raise TypeError(f"Unsupported type '{type(value).__name__}' for a Flux value")

    def render(self) -> str:
        if self.kind is ValueKind.Bool:
            return "true" if self.value else "false"
        if self.kind is ValueKind.Float:
            # keep the fractional part so the literal stays a float
            return np.format_float_positional(self.value, trim="0")
        if self.kind is ValueKind.String:
            return quote(self.value)
        return str(self.value)

    def __str__(self) -> str:
        return self.render()
