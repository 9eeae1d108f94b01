from datetime import datetime, timedelta, timezone

import pydantic
import pytest

from influxkit import (
    Buckets,
    Contains,
    Count,
    Distinct,
    Drop,
    Duplicate,
    Filter,
    From,
    Group,
    GroupMode,
    Integral,
    Keep,
    Keys,
    Limit,
    Max,
    Min,
    OnEmpty,
    Pivot,
    Range,
    Set,
    Sort,
    Stage,
    Tail,
    TypeValue,
    Yield,
)


@pytest.mark.parametrize(
    "stage, expected",
    [
        (From(bucket="server"), 'from(bucket: "server")'),
        (Range(start=100, stop=200), "range(start: 100, stop: 200)"),
        (Range(start="-1h"), "range(start: -1h)"),
        (
            Range(start="v.timeRangeStart", stop="v.timeRangeStop"),
            "range(start: v.timeRangeStart, stop: v.timeRangeStop)",
        ),
        (Filter(fn="(r) => true"), "filter(fn: (r) => true)"),
        (
            Filter(fn="(r) => true", on_empty=OnEmpty.Keep),
            'filter(fn: (r) => true, onEmpty: "keep")',
        ),
        (Group(columns=["a", "b"]), 'group(columns: ["a", "b"])'),
        (Group(columns=[], mode=GroupMode.Except), 'group(columns: [], mode: "except")'),
        (Yield(name="mean"), 'yield(name: "mean")'),
        (Keep(columns=["_time", "_value"]), 'keep(columns: ["_time", "_value"])'),
        (Keep(fn='(column) => column =~ /inodes*/'), "keep(fn: (column) => column =~ /inodes*/)"),
        (Drop(columns=["host"]), 'drop(columns: ["host"])'),
        (Drop(fn="(column) => column =~ /^_/"), "drop(fn: (column) => column =~ /^_/)"),
        (Tail(n=5), "tail(n: 5)"),
        (Tail(n=5, offset=2), "tail(n: 5, offset: 2)"),
        (Distinct(column="host"), 'distinct(column: "host")'),
        (Max(), "max()"),
        (Min(), "min()"),
        (Limit(n=10), "limit(n: 10)"),
        (Limit(n=10, offset=1), "limit(n: 10, offset: 1)"),
        (Set(key="_field", value="temp"), 'set(key: "_field", value: "temp")'),
        (Sort(), "sort()"),
        (Sort(columns=["_value"], desc=True), 'sort(columns: ["_value"], desc: true)'),
        (Sort(desc=False), "sort(desc: false)"),
        (Count(), "count()"),
        (Count(column="_value"), 'count(column: "_value")'),
        (Buckets(), "buckets()"),
        (Integral(unit="10s"), "integral(unit: 10s)"),
        (
            Integral(unit="1m", column="_value", time_column="_time"),
            'integral(unit: 1m, column: "_value", timeColumn: "_time")',
        ),
        (Duplicate(column="tag", as_name="tag_dup"), 'duplicate(column: "tag", as: "tag_dup")'),
        (Keys(), "keys()"),
        (Keys(column="_value"), 'keys(column: "_value")'),
        (
            Pivot(row_key=["_time"], column_key=["_field"], value_column="_value"),
            'pivot(rowKey: ["_time"], columnKey: ["_field"], valueColumn: "_value")',
        ),
    ],
)
def test_stage_rendering(stage, expected):
    assert stage.render() == expected
    assert str(stage) == expected


def test_range_datetime_bounds():
    """Test the RFC3339 UTC rendering of datetime range bounds."""
    start = datetime(2020, 10, 10, 9, 24, 37, tzinfo=timezone.utc)
    stop = datetime(2020, 10, 10, 11, 0, 0, 500_000, tzinfo=timezone(timedelta(hours=1)))
    assert Range(start=start, stop=stop).render() == (
        "range(start: 2020-10-10T09:24:37Z, stop: 2020-10-10T10:00:00.5Z)"
    )
    # naive datetimes are taken as UTC
    assert Range(start=datetime(2021, 1, 1)).render() == "range(start: 2021-01-01T00:00:00Z)"


@pytest.mark.parametrize("bound", [100.5, 100.0, True])
def test_range_rejects_float_and_bool_bounds(bound):
    """Test that non-integer numbers are never coerced into a date or an integer."""
    with pytest.raises(ValueError):
        Range(start=bound)
    with pytest.raises(ValueError):
        Range(start=0, stop=bound)


def test_counts_reject_bool_and_float():
    with pytest.raises(ValueError):
        Tail(n=True)
    with pytest.raises(ValueError):
        Tail(n=5, offset=1.5)
    with pytest.raises(ValueError):
        Limit(n=2.0)
    with pytest.raises(ValueError):
        Limit(n=1, offset=False)


def test_string_arguments_are_quoted():
    assert From(bucket='my "bucket"').render() == 'from(bucket: "my \\"bucket\\"")'
    assert Group(columns=['a"b']).render() == 'group(columns: ["a\\"b"])'


def test_keep_drop_exclusivity():
    """Test the correct exception raise when both or neither of columns and fn are given."""
    with pytest.raises(ValueError, match="keep\\(\\) requires exactly one of"):
        Keep()
    with pytest.raises(ValueError, match="keep\\(\\) requires exactly one of"):
        Keep(columns=["a"], fn="(column) => true")
    with pytest.raises(ValueError, match="drop\\(\\) requires exactly one of"):
        Drop()
    with pytest.raises(ValueError, match="drop\\(\\) requires exactly one of"):
        Drop(columns=["host"], fn="(column) => column =~ /^_/")


def test_contains():
    stage = Contains(value=1, values=[1, 2, 3])
    assert stage.render() == "contains(value: 1, set: [1, 2, 3])"

    stage = Contains(value="a", values=["a", 'b"c'])
    assert stage.render() == 'contains(value: "a", set: ["a", "b\\"c"])'

    stage = Contains(value=TypeValue.from_float(1.0), values=[0.5, 1.0])
    assert stage.render() == "contains(value: 1.0, set: [0.5, 1.0])"

    assert Contains(value=True, values=[]).render() == "contains(value: true, set: [])"


def test_contains_kind_mismatch():
    """Test the correct exception raise when set elements differ in kind from the value."""
    with pytest.raises(ValueError, match="must be of kind 'Integer'"):
        Contains(value=1, values=[1, "2"])
    with pytest.raises(ValueError, match="not a string"):
        Contains(value="a", values="abc")
    with pytest.raises(TypeError, match="Unsupported type"):
        Contains(value=object(), values=[])


def test_stages_are_immutable():
    stage = Limit(n=1)
    with pytest.raises(pydantic.ValidationError):
        stage.n = 2  # type: ignore


def test_base_stage_is_abstract():
    with pytest.raises(TypeError):
        Stage()  # type: ignore
