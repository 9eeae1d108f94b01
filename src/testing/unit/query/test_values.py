from datetime import datetime, timezone

import numpy as np
import pytest

from influxkit import Time, TypeValue, ValueKind
from influxkit.models.query.values import quote


def test_value_rendering():
    assert TypeValue.from_bool(True).render() == "true"
    assert TypeValue.from_bool(False).render() == "false"
    assert TypeValue.from_integer(-3).render() == "-3"
    assert TypeValue.from_uinteger(3).render() == "3"
    assert TypeValue.from_time(1602321877560).render() == "1602321877560"
    assert TypeValue.from_string("a").render() == '"a"'


def test_float_keeps_fractional_part():
    """Test that float literals are never rendered as integers."""
    assert TypeValue.from_float(1.0).render() == "1.0"
    assert TypeValue.from_float(10.123).render() == "10.123"
    assert TypeValue.from_float(2).render() == "2.0"
    assert str(TypeValue.from_float(-0.5)) == "-0.5"


def test_quote():
    assert quote("plain") == '"plain"'
    assert quote('a "b"') == '"a \\"b\\""'
    assert quote("C:\\tmp") == '"C:\\\\tmp"'


@pytest.mark.parametrize(
    "value, kind",
    [
        (True, ValueKind.Bool),
        (1, ValueKind.Integer),
        (1.5, ValueKind.Float),
        ("s", ValueKind.String),
        (np.int16(1), ValueKind.Integer),
        (np.uint32(1), ValueKind.UInteger),
        (np.float32(1.5), ValueKind.Float),
        (np.bool_(False), ValueKind.Bool),
    ],
)
def test_from_value_kinds(value, kind):
    assert TypeValue.from_value(value).kind is kind


def test_from_value_time():
    """Test that datetime and Time values become millisecond Time scalars."""
    dt = datetime(2020, 10, 10, tzinfo=timezone.utc)
    assert TypeValue.from_value(dt) == TypeValue.from_time(1602288000000)
    assert TypeValue.from_value(Time.from_nanoseconds(42_000_000)) == TypeValue.from_time(42)


def test_from_value_passthrough():
    value = TypeValue.from_string("x")
    assert TypeValue.from_value(value) is value


def test_invalid_values():
    with pytest.raises(ValueError, match="non-negative"):
        TypeValue.from_uinteger(-1)
    with pytest.raises(ValueError, match="must be finite"):
        TypeValue.from_float(float("inf"))
    with pytest.raises(ValueError, match="expects a bool"):
        TypeValue.from_bool("true")  # type: ignore
    with pytest.raises(TypeError, match="Unsupported type 'list'"):
        TypeValue.from_value([1])
