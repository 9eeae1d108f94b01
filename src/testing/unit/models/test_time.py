import time
from datetime import datetime, timedelta, timezone

import pytest

from influxkit import Time


def test_time_from_nanoseconds():
    """Test the split of an epoch offset and its truncation to milliseconds."""
    tstamp = Time.from_nanoseconds(1_602_321_877_560_123_456)
    assert tstamp == Time(sec=1602321877, nanosec=560_123_456)
    assert tstamp.to_milliseconds() == 1602321877560

    # the remainder stays non-negative before the epoch
    tstamp = Time.from_nanoseconds(-1_500_000_000)
    assert tstamp == Time(sec=-2, nanosec=500_000_000)
    assert tstamp.to_milliseconds() == -1500


def test_time_from_datetime():
    dt = datetime(2020, 10, 10, 9, 24, 37, 560_000, tzinfo=timezone.utc)
    assert Time.from_datetime(dt).to_milliseconds() == 1602321877560

    # naive datetimes are taken as UTC
    assert Time.from_datetime(dt.replace(tzinfo=None)) == Time.from_datetime(dt)

    # aware datetimes are converted to UTC
    cet = timezone(timedelta(hours=1))
    assert Time.from_datetime(dt.astimezone(cet)) == Time.from_datetime(dt)


def test_invalid_nanoseconds():
    """Test the correct exception raise for out of range nanoseconds."""
    with pytest.raises(ValueError, match="Nanoseconds must be in"):
        Time(sec=0, nanosec=1_000_000_000)
    with pytest.raises(ValueError, match="Nanoseconds must be in"):
        Time(sec=0, nanosec=-1)


def test_time_now(monkeypatch):
    monkeypatch.setattr(time, "time_ns", lambda: 1_000_000_001)
    assert Time.now() == Time(sec=1, nanosec=1)
