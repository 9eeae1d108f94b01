"""
influxkit SDK: Building Write Payloads.

This script demonstrates the write path without any transport:
1. Building measurements with the fluent, immutable builder.
2. Converting an Arrow table (e.g. loaded from Parquet) into measurements.
3. Splitting the resulting points into size-bounded line-protocol payloads,
    ready to be posted to the write endpoint with millisecond precision.
"""

import logging as log
from datetime import datetime, timedelta, timezone

import numpy as np
import pyarrow as pa
from rich.console import Console
from rich.panel import Panel

from influxkit import (
    Measurement,
    WriteConfig,
    encode_batches,
    measurements_from_arrow,
    setup_sdk_logging,
)

# Initialize Rich Console for terminal output
console = Console()

START = datetime(2020, 10, 10, 9, 24, 37, tzinfo=timezone.utc)


def build_gps_points():
    """Shares one partially configured builder between several points."""
    base = Measurement.builder("gps").tag("country", "Spain").tag("city", "Madrid")
    return [
        base.field("latitude", 40.447992135544304)
        .field("longitude", -3.689346313476562)
        .field("satellites", np.uint8(9))
        .timestamp(START + timedelta(seconds=i))
        .build()
        for i in range(3)
    ]


def build_cpu_points():
    """Reads a columnar batch of samples."""
    table = pa.table(
        {
            "host": pa.array(["server01", "server02", None, "server01"]),
            "usage": pa.array([0.64, 0.71, None, 0.12], type=pa.float32()),
            "cores": pa.array([8, 16, 4, 8], type=pa.uint16()),
            "time": pa.array(
                [START + timedelta(milliseconds=250 * i) for i in range(4)],
                type=pa.timestamp("ms", tz="UTC"),
            ),
        }
    )
    return measurements_from_arrow(
        table,
        "cpu",
        field_columns=["usage", "cores"],
        tag_columns=["host"],
        timestamp_column="time",
    )


def run():
    console.print(Panel("[bold green]Phase 1: Building measurements[/bold green]"))
    points = build_gps_points() + build_cpu_points()
    for point in points:
        console.print(f"• {point}", markup=False, highlight=False)

    console.print(Panel("[bold green]Phase 2: Batching the write payload[/bold green]"))
    config = WriteConfig(max_batch_size_records=3)
    for i, payload in enumerate(encode_batches(points, config)):
        console.print(f"[bold]Batch {i}[/bold] ({len(payload.encode('utf-8'))} bytes)")
        console.print(payload, markup=False, highlight=False)


if __name__ == "__main__":
    setup_sdk_logging(level="DEBUG", pretty=True)
    # Keep third-party loggers quiet
    log.basicConfig(level=log.WARNING)
    run()
