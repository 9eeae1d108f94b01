"""
Configuration Module.

This module defines the configuration structures used to control how
measurements are grouped into write payloads.
"""

from dataclasses import dataclass

DEFAULT_MAX_BATCH_BYTES = 5 * 1024 * 1024
DEFAULT_MAX_BATCH_SIZE_RECORDS = 5_000


@dataclass(frozen=True)
class WriteConfig:
    """
    Batching limits applied by
    [`encode_batches()`][influxkit.encoding.line_protocol.encode_batches].

    A batch is closed as soon as adding the next line would exceed **either**
    limit, so every emitted payload stays within both thresholds. The only
    exception is a single line that alone exceeds `max_batch_size_bytes`: it
    is emitted in a batch of its own.
    """

    max_batch_size_bytes: int = DEFAULT_MAX_BATCH_BYTES
    """
    The UTF-8 size in bytes of a newline-joined payload before it is closed.
    """

    max_batch_size_records: int = DEFAULT_MAX_BATCH_SIZE_RECORDS
    """
    The maximum number of line-protocol lines in a single payload.
    """

    def __post_init__(self):
        if self.max_batch_size_bytes <= 0:
            raise ValueError(
                f"'max_batch_size_bytes' must be positive, got {self.max_batch_size_bytes}"
            )
        if self.max_batch_size_records <= 0:
            raise ValueError(
                f"'max_batch_size_records' must be positive, got {self.max_batch_size_records}"
            )
