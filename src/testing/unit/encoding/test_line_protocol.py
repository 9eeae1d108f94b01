import logging

import pyarrow as pa
import pytest

from influxkit import (
    Measurement,
    WriteConfig,
    encode_batches,
    encode_measurements,
    measurements_from_arrow,
)


def _point(i: int, name: str = "cpu") -> Measurement:
    return Measurement(name=name, fields={"v": i}, timestamp_ms=i)


def test_encode_measurements():
    """Test that measurements are newline-joined without a trailing newline."""
    body = encode_measurements([_point(1), _point(2)])
    assert body == "cpu v=1i 1\ncpu v=2i 2"
    assert encode_measurements([]) == ""


def test_write_config_defaults_and_validation():
    config = WriteConfig()
    assert config.max_batch_size_bytes == 5 * 1024 * 1024
    assert config.max_batch_size_records == 5000

    with pytest.raises(ValueError, match="max_batch_size_records"):
        WriteConfig(max_batch_size_records=0)
    with pytest.raises(ValueError, match="max_batch_size_bytes"):
        WriteConfig(max_batch_size_bytes=-1)


def test_batches_by_record_count():
    """Test the split of a stream of measurements on the record limit."""
    points = [_point(i) for i in range(5)]
    batches = list(encode_batches(points, WriteConfig(max_batch_size_records=2)))
    assert batches == [
        "cpu v=0i 0\ncpu v=1i 1",
        "cpu v=2i 2\ncpu v=3i 3",
        "cpu v=4i 4",
    ]
    # order is preserved across batches
    assert "\n".join(batches) == encode_measurements(points)


def test_batches_by_byte_size():
    """Test that every batch fits the byte limit, joining newlines included."""
    points = [_point(i) for i in range(4)]  # each line is 10 bytes
    config = WriteConfig(max_batch_size_bytes=21)
    batches = list(encode_batches(points, config))
    assert batches == [
        "cpu v=0i 0\ncpu v=1i 1",
        "cpu v=2i 2\ncpu v=3i 3",
    ]
    assert all(len(b.encode("utf-8")) <= 21 for b in batches)

    batches = list(encode_batches(points, WriteConfig(max_batch_size_bytes=20)))
    assert len(batches) == 4


def test_oversized_line_is_sent_alone(caplog):
    points = [_point(1), Measurement(name="big", fields={"s": "x" * 50}, timestamp_ms=1), _point(2)]
    with caplog.at_level(logging.WARNING):
        batches = list(encode_batches(points, WriteConfig(max_batch_size_bytes=30)))

    assert len(batches) == 3
    assert batches[1].startswith("big ")
    assert "exceeds 'max_batch_size_bytes'" in caplog.text


def test_batches_empty_input():
    assert list(encode_batches([])) == []


def test_measurements_from_arrow():
    """Test the conversion of an arrow table, with null cells omitted."""
    table = pa.table(
        {
            "host": pa.array(["a", None], type=pa.string()),
            "usage": pa.array([0.5, None], type=pa.float64()),
            "count": pa.array([1, 2], type=pa.uint16()),
            "time": pa.array([1000, 2000], type=pa.int64()),
        }
    )
    measurements = measurements_from_arrow(
        table,
        "cpu",
        field_columns=["usage", "count"],
        tag_columns=["host"],
        timestamp_column="time",
    )
    assert [m.to_line_protocol() for m in measurements] == [
        "cpu,host=a count=1u,usage=0.5 1000",
        "cpu count=2u 2000",
    ]


def test_measurements_from_arrow_timestamp_column():
    """Test that arrow timestamps are truncated to milliseconds."""
    table = pa.table(
        {
            "v": pa.array([True], type=pa.bool_()),
            "ts": pa.array([1_602_321_877_560_999_999], type=pa.timestamp("ns", tz="UTC")),
        }
    )
    (m,) = measurements_from_arrow(table, "m", field_columns=["v"], timestamp_column="ts")
    assert m.to_line_protocol() == "m v=true 1602321877560"


def test_measurements_from_record_batch():
    batch = pa.RecordBatch.from_pydict(
        {"v": pa.array([1, 2], type=pa.int8()), "tag": pa.array([1, 2], type=pa.int32())}
    )
    measurements = measurements_from_arrow(
        batch, "m", field_columns=["v"], tag_columns=["tag"], timestamp_column="v"
    )
    assert [m.to_line_protocol() for m in measurements] == ["m,tag=1 v=1i 1", "m,tag=2 v=2i 2"]


def test_all_null_rows_are_skipped(caplog):
    table = pa.table({"v": pa.array([None, 3.0], type=pa.float32())})
    with caplog.at_level(logging.WARNING):
        measurements = measurements_from_arrow(table, "m", field_columns=["v"])

    assert len(measurements) == 1
    assert measurements[0].fields["v"].value == 3.0
    assert "Skipping row 0 of 'm'" in caplog.text


def test_measurements_from_arrow_errors():
    """Test the correct exception raise for missing or unsupported columns."""
    table = pa.table({"v": [1], "raw": pa.array([b"x"], type=pa.binary())})
    with pytest.raises(ValueError, match="The column 'missing' does not exist"):
        measurements_from_arrow(table, "m", field_columns=["missing"])
    with pytest.raises(ValueError, match="At least one field column"):
        measurements_from_arrow(table, "m", field_columns=[])
    with pytest.raises(TypeError, match="Unsupported arrow type"):
        measurements_from_arrow(table, "m", field_columns=["raw"])
    with pytest.raises(TypeError, match="Timestamp column must be"):
        measurements_from_arrow(table, "m", field_columns=["v"], timestamp_column="raw")
