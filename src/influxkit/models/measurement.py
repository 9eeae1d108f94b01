"""
Measurement Module.

This module defines the [`Measurement`][influxkit.models.measurement.Measurement],
the unit of data written to the database, and its staged
[`MeasurementBuilder`][influxkit.models.measurement.MeasurementBuilder].

A measurement renders itself to exactly one line-protocol line:

```
name[,tag_key=tag_value...] field_key=field_value[,field_key=field_value...] timestamp_ms
```
"""

from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from pydantic import field_validator, model_validator

from ..helpers import (
    ensure_single_line,
    escape_key,
    escape_measurement,
    escape_tag_value,
)
from ..logging_config import get_logger
from .base_model import BaseModel
from .field import Field
from .time import Time

# Set the hierarchical logger
logger = get_logger(__name__)

TIMESTAMP_MAX = 2**128 - 1


def _current_timestamp_ms() -> int:
    """Reads the wall clock, in milliseconds since the Unix epoch."""
    now = Time.now()
    if now.sec < 0:
        raise ValueError(
            f"System clock reports a time before the Unix epoch ({now.sec}s): "
            "set an explicit timestamp."
        )
    return now.to_milliseconds()


def _validate_key(key: str, what: str) -> str:
    if not key:
        raise ValueError(f"Empty {what} name")
    return ensure_single_line(key, f"{what.capitalize()} name")


class Measurement(BaseModel):
    """
    A single data point: a named set of tagged, timestamped field values.

    Measurements are usually created through the fluent
    [`builder()`][influxkit.models.measurement.Measurement.builder], but can
    be constructed directly as well. Field values are converted with
    [`Field.from_value()`][influxkit.models.field.Field.from_value].

    Attributes:
        name: The measurement name.
        fields: Field name to [`Field`][influxkit.models.field.Field] value (at least one).
        tags: Tag name to raw tag value. Values are escaped when rendered.
        timestamp_ms: Milliseconds since the Unix epoch. When omitted, the
            current wall-clock time is used.

    Example:
        ```python
        from influxkit import Measurement

        measurement = (
            Measurement.builder("gps")
            .field("latitude", 40.447992135544304)
            .field("longitude", -3.689346313476562)
            .tag("country", "Spain")
            .tag("city", "Madrid")
            .timestamp_ms(1622888382963)
            .build()
        )
        measurement.to_line_protocol()
        # 'gps,city=Madrid,country=Spain latitude=40.447992135544304,longitude=-3.689346313476562 1622888382963'
        ```
    """

    name: str
    """The measurement name."""

    fields: Dict[str, Field]
    """Field name to typed value. Never empty."""

    tags: Dict[str, str] = {}
    """Tag name to raw (unescaped) tag value."""

    timestamp_ms: Optional[int] = None
    """Milliseconds since the Unix epoch; filled from the wall clock when omitted."""

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return _validate_key(v, "measurement")

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, v: Dict[str, str]) -> Dict[str, str]:
        for key, value in v.items():
            _validate_key(key, "tag")
            ensure_single_line(value, f"Value of tag '{key}'")
        return v

    @field_validator("fields", mode="before")
    @classmethod
    def _convert_fields(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {key: Field.from_value(value) for key, value in v.items()}

    @field_validator("fields")
    @classmethod
    def _validate_fields(cls, v: Dict[str, Field]) -> Dict[str, Field]:
        for key in v:
            _validate_key(key, "field")
        return v

    @field_validator("timestamp_ms")
    @classmethod
    def _validate_timestamp(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not (0 <= v <= TIMESTAMP_MAX):
            raise ValueError(f"Timestamp must be an unsigned 128-bit value. Got {v}")
        return v

    @model_validator(mode="after")
    def _require_fields(self) -> "Measurement":
        if not self.fields:
            raise ValueError("fields cannot be empty")
        return self

    def model_post_init(self, context: Any) -> None:
        super().model_post_init(context)
        if self.timestamp_ms is None:
            self.timestamp_ms = _current_timestamp_ms()
            logger.debug(
                f"No timestamp for measurement '{self.name}', using clock time {self.timestamp_ms}"
            )

    @staticmethod
    def builder(name: str) -> "MeasurementBuilder":
        """Starts a staged [`MeasurementBuilder`][influxkit.models.measurement.MeasurementBuilder]."""
        return MeasurementBuilder(name)

    def add_tag(self, name: str, value: str):
        """
        Adds (or replaces) a tag on an already finalized measurement.

        Only the new pair is checked; the rest of the measurement is not
        validated again.
        """
        _validate_key(name, "tag")
        self.tags[name] = ensure_single_line(value, f"Value of tag '{name}'")

    def add_field(self, name: str, value: Any):
        """
        Adds (or replaces) a field on an already finalized measurement.

        `value` is converted with [`Field.from_value()`][influxkit.models.field.Field.from_value].
        """
        _validate_key(name, "field")
        self.fields[name] = Field.from_value(value)

    def to_line_protocol(self) -> str:
        """
        Converts this measurement to a single line-protocol line.

        Tags and fields are emitted sorted by name, so logically equal
        measurements always render to identical bytes. The output has no
        trailing newline.
        """
        head = escape_measurement(self.name)
        if self.tags:
            head += "," + ",".join(
                f"{escape_key(key)}={escape_tag_value(value)}"
                for key, value in sorted(self.tags.items())
            )
        fields_part = ",".join(
            f"{escape_key(key)}={value.to_line_protocol()}"
            for key, value in sorted(self.fields.items())
        )
        return f"{head} {fields_part} {self.timestamp_ms}"

    def __str__(self) -> str:
        return self.to_line_protocol()


def _collapse(pairs: Iterable[Tuple[str, Any]], what: str, name: str) -> Dict[str, Any]:
    collapsed: Dict[str, Any] = {}
    for key, value in pairs:
        if key in collapsed:
            logger.warning(
                f"Duplicate {what} '{key}' in measurement '{name}': keeping the last value"
            )
        collapsed[key] = value
    return collapsed


class MeasurementBuilder:
    """
    Staged builder accumulating the tags, fields and timestamp of a measurement.

    Every method returns a **new** builder and leaves the receiver untouched,
    so a partially configured builder can be reused as a template:

    ```python
    base = Measurement.builder("cpu").tag("host", "server01")
    m1 = base.field("usage", 0.64).build()
    m2 = base.field("usage", 0.71).tag("core", "1").build()
    ```

    When the same tag or field name is given twice, the last value wins.
    """

    def __init__(
        self,
        name: str,
        tags: Tuple[Tuple[str, str], ...] = (),
        fields: Tuple[Tuple[str, Field], ...] = (),
        timestamp_ms: Optional[int] = None,
    ):
        self._name = name
        self._tags = tags
        self._fields = fields
        self._timestamp_ms = timestamp_ms

    def _replace(self, **changes) -> "MeasurementBuilder":
        state = {
            "name": self._name,
            "tags": self._tags,
            "fields": self._fields,
            "timestamp_ms": self._timestamp_ms,
        }
        state.update(changes)
        return MeasurementBuilder(**state)

    def tag(self, name: str, value: str) -> "MeasurementBuilder":
        """Returns a builder with the tag `name=value` added."""
        return self._replace(tags=self._tags + ((name, value),))

    def field(self, name: str, value: Any) -> "MeasurementBuilder":
        """
        Returns a builder with the field `name=value` added.

        Raises:
            TypeError: If `value` cannot be converted to a [`Field`][influxkit.models.field.Field].
        """
        return self._replace(fields=self._fields + ((name, Field.from_value(value)),))

    def timestamp_ms(self, timestamp_ms: int) -> "MeasurementBuilder":
        """Returns a builder with an explicit timestamp in milliseconds since the epoch."""
        return self._replace(timestamp_ms=timestamp_ms)

    def timestamp(self, stamp: Union[Time, datetime]) -> "MeasurementBuilder":
        """Returns a builder with an explicit timestamp taken from a `Time` or `datetime`."""
        if isinstance(stamp, datetime):
            stamp = Time.from_datetime(stamp)
        return self.timestamp_ms(stamp.to_milliseconds())

    def build(self) -> Measurement:
        """
        Finalizes the builder into a [`Measurement`][influxkit.models.measurement.Measurement].

        Raises:
            ValueError: If no field was added, if a name or value is invalid,
                or if the wall clock cannot provide a valid default timestamp.
        """
        if not self._fields:
            raise ValueError("fields cannot be empty")
        return Measurement(
            name=self._name,
            tags=_collapse(self._tags, "tag", self._name),
            fields=_collapse(self._fields, "field", self._name),
            timestamp_ms=self._timestamp_ms,
        )

    def __repr__(self) -> str:
        return (
            f"MeasurementBuilder(name={self._name!r}, tags={list(self._tags)!r}, "
            f"fields={list(self._fields)!r}, timestamp_ms={self._timestamp_ms!r})"
        )
