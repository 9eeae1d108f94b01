"""
influxkit - Python SDK for writing to and querying a time-series database.

This module provides the main entry points:

- **Measurement**: typed, tagged data points rendered to line protocol.
- **Query**: fluent builder for Flux pipeline queries.
- **Encoding**: write payloads (and batches of them) from measurements.

Example:
    >>> from influxkit import Measurement, Query
    >>> m = Measurement.builder("m1").tag("tag1", "v1").field("f1", True).timestamp_ms(1000).build()
    >>> m.to_line_protocol()
    'm1,tag1=v1 f1=true 1000'
    >>> Query().from_("server").range(start=100, stop=200).to_flux()
    'from(bucket: "server")\\n |> range(start: 100, stop: 200)'
"""

# --- Core Models ---
from .models import (
    BaseModel as BaseModel,
    Time as Time,
    Field as Field,
    Measurement as Measurement,
    MeasurementBuilder as MeasurementBuilder,
)

# --- Query ---
from .models.query import (
    Query as Query,
    StageProtocol as StageProtocol,
    TypeValue as TypeValue,
    Stage as Stage,
    From as From,
    Range as Range,
    Filter as Filter,
    Group as Group,
    Yield as Yield,
    Keep as Keep,
    Drop as Drop,
    Tail as Tail,
    Contains as Contains,
    Distinct as Distinct,
    Max as Max,
    Min as Min,
    Limit as Limit,
    Set as Set,
    Sort as Sort,
    Count as Count,
    Buckets as Buckets,
    Integral as Integral,
    Duplicate as Duplicate,
    Keys as Keys,
    Pivot as Pivot,
)

# --- Encoding ---
from .encoding import (
    encode_measurements as encode_measurements,
    encode_batches as encode_batches,
    measurements_from_arrow as measurements_from_arrow,
)
from .config import WriteConfig as WriteConfig

# --- Enums ---
from .enum import (
    FieldKind as FieldKind,
    ValueKind as ValueKind,
    OnEmpty as OnEmpty,
    GroupMode as GroupMode,
)

from .logging_config import (
    get_logger as get_logger,
    setup_sdk_logging as setup_sdk_logging,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_sdk_logging",
    # Core Models
    "BaseModel",
    "Time",
    "Field",
    "Measurement",
    "MeasurementBuilder",
    # Query
    "Query",
    "StageProtocol",
    "TypeValue",
    "Stage",
    "From",
    "Range",
    "Filter",
    "Group",
    "Yield",
    "Keep",
    "Drop",
    "Tail",
    "Contains",
    "Distinct",
    "Max",
    "Min",
    "Limit",
    "Set",
    "Sort",
    "Count",
    "Buckets",
    "Integral",
    "Duplicate",
    "Keys",
    "Pivot",
    # Encoding
    "encode_measurements",
    "encode_batches",
    "measurements_from_arrow",
    "WriteConfig",
    # Enums
    "FieldKind",
    "ValueKind",
    "OnEmpty",
    "GroupMode",
]


# --- Set up the top-level logger for the SDK ---

from logging import NullHandler

logging_config = get_logger()
logging_config.addHandler(NullHandler())
