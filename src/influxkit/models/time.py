"""
Point Timestamps.

[`Time`][influxkit.models.time.Time] holds an instant as whole seconds plus a
nanosecond remainder. It reads the wall clock for measurements finalized
without an explicit timestamp and converts `datetime` values to the
millisecond precision used on the write path.
"""

import time
from datetime import datetime, timezone

from pydantic import ConfigDict, field_validator

from .base_model import BaseModel

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Time(BaseModel):
    """
    An instant relative to the Unix epoch.

    Attributes:
        sec: Whole seconds since the epoch (negative before 1970).
        nanosec: Nanoseconds within the second, in `[0, 999_999_999]`.
    """

    model_config = ConfigDict(frozen=True)

    sec: int
    nanosec: int

    @field_validator("nanosec")
    @classmethod
    def validate_nanosec(cls, v: int) -> int:
        if not (0 <= v < 1_000_000_000):
            raise ValueError(f"Nanoseconds must be in [0, 1e9). Got {v}")
        return v

    @classmethod
    def from_nanoseconds(cls, total_nanoseconds: int) -> "Time":
        """Splits an epoch offset in nanoseconds; the remainder is always non-negative."""
        sec, nanosec = divmod(total_nanoseconds, 1_000_000_000)
        return cls(sec=sec, nanosec=nanosec)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Time":
        """
        Converts a `datetime` exactly, without going through a float.

        Naive datetimes are interpreted as UTC.
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        delta = dt - _EPOCH
        total_us = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
        return cls.from_nanoseconds(total_us * 1_000)

    @classmethod
    def now(cls) -> "Time":
        """Reads the wall clock."""
        return cls.from_nanoseconds(time.time_ns())

    def to_milliseconds(self) -> int:
        """Epoch milliseconds, sub-millisecond part truncated."""
        return self.sec * 1_000 + self.nanosec // 1_000_000
