"""
Line Protocol Payload Encoding.

This module turns collections of
[`Measurement`][influxkit.models.measurement.Measurement] objects into the
request bodies posted to the write endpoint (one line per point, joined by
`\\n`), and builds measurements from Arrow tabular data.
"""

from typing import Iterable, Iterator, List, Optional, Sequence, Union

import pyarrow as pa

from ..config import WriteConfig
from ..logging_config import get_logger
from ..models import Field, Measurement

# Set the hierarchical logger
logger = get_logger(__name__)


def encode_measurements(measurements: Iterable[Measurement]) -> str:
    """
    Encodes measurements into a single write payload.

    Args:
        measurements: An iterable of Measurement objects.

    Returns:
        The line-protocol lines joined by `\\n`, without a trailing newline.
        Empty string if no measurements.
    """
    return "\n".join(m.to_line_protocol() for m in measurements)


def _flush(batch: List[str], batch_bytes: int) -> str:
    logger.debug(f"Flushing write batch: {len(batch)} lines, {batch_bytes} bytes")
    return "\n".join(batch)


def encode_batches(
    measurements: Iterable[Measurement], config: Optional[WriteConfig] = None
) -> Iterator[str]:
    """
    Encodes measurements into write payloads bounded by the `config` limits.

    Lines keep their input order across batches. A batch is closed when the
    next line would exceed either `max_batch_size_records` or
    `max_batch_size_bytes`; a single line larger than the byte limit is
    emitted alone.

    Args:
        measurements: An iterable of Measurement objects (consumed lazily).
        config: The batching limits. Defaults to `WriteConfig()`.

    Yields:
        Newline-joined payload strings.
    """
    config = config or WriteConfig()
    batch: List[str] = []
    batch_bytes = 0

    for measurement in measurements:
        line = measurement.to_line_protocol()
        line_bytes = len(line.encode("utf-8"))
        # joining adds one '\n' per line after the first
        added = line_bytes + 1 if batch else line_bytes

        if batch and (
            len(batch) >= config.max_batch_size_records
            or batch_bytes + added > config.max_batch_size_bytes
        ):
            yield _flush(batch, batch_bytes)
            batch, batch_bytes, added = [], 0, line_bytes

        if added > config.max_batch_size_bytes:
            logger.warning(
                f"Line of {line_bytes} bytes exceeds 'max_batch_size_bytes' "
                f"({config.max_batch_size_bytes}): sending it in its own batch"
            )

        batch.append(line)
        batch_bytes += added

    if batch:
        yield _flush(batch, batch_bytes)


def _scalars(column: pa.ChunkedArray) -> List[pa.Scalar]:
    return [scalar for chunk in column.chunks for scalar in chunk]


def _timestamps_ms(column: pa.ChunkedArray) -> List[Optional[int]]:
    """Converts an integer (milliseconds) or arrow timestamp column to epoch milliseconds."""
    if pa.types.is_timestamp(column.type):
        # truncate sub-millisecond precision instead of failing the safe cast
        column = column.cast(pa.timestamp("ms", tz=column.type.tz), safe=False)
        return column.cast(pa.int64()).to_pylist()
    if pa.types.is_integer(column.type):
        return column.to_pylist()
    raise TypeError(
        f"Timestamp column must be an integer or timestamp column, got '{column.type}'"
    )


def measurements_from_arrow(
    data: Union[pa.Table, pa.RecordBatch],
    name: str,
    *,
    field_columns: Sequence[str],
    tag_columns: Sequence[str] = (),
    timestamp_column: Optional[str] = None,
) -> List[Measurement]:
    """
    Builds one measurement per row of an Arrow table.

    Field kinds follow the column types (e.g. a `pa.uint16()` column yields
    `UInteger` fields), see [`Field.from_value()`][influxkit.models.field.Field.from_value].
    Null tag and field cells are omitted from their row; rows where every
    field cell is null are skipped. Null (or absent) timestamps fall back to
    the wall clock.

    Args:
        data: The source `pa.Table` or `pa.RecordBatch`.
        name: The measurement name shared by all rows.
        field_columns: Columns rendered as fields.
        tag_columns: Columns rendered as tags (values converted to `str`).
        timestamp_column: Optional column holding the point time, either
            integers in milliseconds or an arrow timestamp column.

    Returns:
        The measurements, in row order.

    Raises:
        ValueError: If no field column is given or a column does not exist.
        TypeError: If a column type cannot be mapped.
    """
    table = pa.Table.from_batches([data]) if isinstance(data, pa.RecordBatch) else data

    if not field_columns:
        raise ValueError("At least one field column is required")
    requested = [*field_columns, *tag_columns]
    if timestamp_column is not None:
        requested.append(timestamp_column)
    for column_name in requested:
        if column_name not in table.column_names:
            raise ValueError(f"The column '{column_name}' does not exist in the table.")

    fields = {c: _scalars(table.column(c)) for c in field_columns}
    tags = {c: table.column(c).to_pylist() for c in tag_columns}
    timestamps = (
        _timestamps_ms(table.column(timestamp_column))
        if timestamp_column is not None
        else [None] * table.num_rows
    )

    measurements = []
    for row in range(table.num_rows):
        row_fields = {
            c: Field.from_value(scalars[row])
            for c, scalars in fields.items()
            if scalars[row].is_valid
        }
        if not row_fields:
            logger.warning(f"Skipping row {row} of '{name}': all field values are null")
            continue
        row_tags = {c: str(values[row]) for c, values in tags.items() if values[row] is not None}
        measurements.append(
            Measurement(
                name=name,
                tags=row_tags,
                fields=row_fields,
                timestamp_ms=timestamps[row],
            )
        )
    logger.debug(f"Built {len(measurements)} '{name}' measurements from {table.num_rows} rows")
    return measurements
