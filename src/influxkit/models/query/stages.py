"""
Pipeline Stage Descriptors.

Each class in this module describes one Flux pipeline operation. Stages are
immutable and render themselves to the text of a single pipeline step via
`render()`; the [`Query`][influxkit.models.query.builders.Query] builder joins
those steps with the pipe-forward operator.

| Stage | Rendering |
| --- | --- |
| `From` | `from(bucket: "B")` |
| `Range` | `range(start: S[, stop: T])` |
| `Filter` | `filter(fn: EXPR[, onEmpty: "keep"\\|"drop"])` |
| `Group` | `group(columns: ["a", "b"][, mode: "by"\\|"except"])` |
| `Yield` | `yield(name: "N")` |
| `Keep` / `Drop` | `keep(columns: [...])` or `keep(fn: EXPR)` |
| `Tail` / `Limit` | `tail(n: N[, offset: O])` |
| `Contains` | `contains(value: V, set: [v1, v2])` |
| `Distinct` | `distinct(column: "C")` |
| `Max` / `Min` / `Buckets` | `max()` / `min()` / `buckets()` |
| `Set` | `set(key: "K", value: "V")` |
| `Sort` | `sort([columns: [...]][, desc: B])` |
| `Count` / `Keys` | `count([column: "C"])` |
| `Integral` | `integral(unit: U[, column: "C"][, timeColumn: "T"])` |
| `Duplicate` | `duplicate(column: "C", as: "A")` |
| `Pivot` | `pivot(rowKey: [...], columnKey: [...], valueColumn: "V")` |

Predicates (`fn`) and durations (`unit`, string range bounds) are opaque,
pre-formatted Flux expressions and are emitted verbatim.
"""

from abc import abstractmethod
from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional, Tuple, Union

from pydantic import ConfigDict, Strict, StrictInt, StrictStr, field_validator, model_validator

from ...enum import GroupMode, OnEmpty
from ..base_model import BaseModel
from .values import TypeValue, quote

# strict members: float and bool bounds are rejected, never read as epoch dates
RangeBound = Union[StrictInt, Annotated[datetime, Strict()], StrictStr]


def _quoted_list(items: List[str]) -> str:
    return "[" + ", ".join(quote(item) for item in items) + "]"


def _call(function: str, *args: Tuple[str, Optional[str]]) -> str:
    """Renders `function(name: value, ...)`, skipping arguments whose value is None."""
    rendered = ", ".join(f"{name}: {value}" for name, value in args if value is not None)
    return f"{function}({rendered})"


def _render_bound(bound: RangeBound) -> str:
    if isinstance(bound, datetime):
        if bound.tzinfo is None:
            bound = bound.replace(tzinfo=timezone.utc)
        bound = bound.astimezone(timezone.utc)
        text = bound.strftime("%Y-%m-%dT%H:%M:%S")
        if bound.microsecond:
            text += f".{bound.microsecond:06d}".rstrip("0")
        return text + "Z"
    return str(bound)


def _optional(value: Optional[Any], render) -> Optional[str]:
    return None if value is None else render(value)


def _render_bool(value: bool) -> str:
    return "true" if value else "false"


class Stage(BaseModel):
    """Base class of all pipeline stage descriptors."""

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def render(self) -> str:
        """Renders the stage as one pipeline step."""
        ...

    def __str__(self) -> str:
        return self.render()


class From(Stage):
    """Reads from a bucket. Usually the first stage of a query."""

    bucket: str

    def render(self) -> str:
        return _call("from", ("bucket", quote(self.bucket)))


class Range(Stage):
    """
    Restricts records to a time window.

    Bounds may be integers (Unix seconds), `datetime` objects (rendered as
    RFC3339 UTC timestamps; naive values are taken as UTC) or raw Flux
    expressions such as `"-1h"` or `"v.timeRangeStart"`. An omitted `stop`
    means "now" on the server. Floats and bools are rejected.
    """

    start: RangeBound
    stop: Optional[RangeBound] = None

    def render(self) -> str:
        return _call(
            "range",
            ("start", _render_bound(self.start)),
            ("stop", _optional(self.stop, _render_bound)),
        )


class Filter(Stage):
    """Filters records with a predicate function, e.g. `(r) => r._measurement == "cpu"`."""

    fn: str
    on_empty: Optional[OnEmpty] = None

    def render(self) -> str:
        return _call(
            "filter",
            ("fn", self.fn),
            ("onEmpty", _optional(self.on_empty, lambda v: quote(v.value))),
        )


class Group(Stage):
    columns: List[str]
    mode: Optional[GroupMode] = None

    def render(self) -> str:
        return _call(
            "group",
            ("columns", _quoted_list(self.columns)),
            ("mode", _optional(self.mode, lambda v: quote(v.value))),
        )


class Yield(Stage):
    name: str

    def render(self) -> str:
        return _call("yield", ("name", quote(self.name)))


class _ColumnsOrPredicate(Stage):
    """
    Shared shape of `keep()` and `drop()`: either a list of columns or a
    predicate function over column names, never both.
    """

    columns: Optional[List[str]] = None
    fn: Optional[str] = None

    @model_validator(mode="after")
    def _check_exclusive(self):
        if (self.columns is None) == (self.fn is None):
            raise ValueError(
                f"{self._function()}() requires exactly one of 'columns' or 'fn'"
            )
        return self

    @classmethod
    def _function(cls) -> str:
        return cls.__name__.lower()

    def render(self) -> str:
        return _call(
            self._function(),
            ("columns", _optional(self.columns, _quoted_list)),
            ("fn", self.fn),
        )


class Keep(_ColumnsOrPredicate):
    """Keeps only the listed columns (or the columns matching `fn`)."""


class Drop(_ColumnsOrPredicate):
    """Drops the listed columns (or the columns matching `fn`)."""


class Tail(Stage):
    n: StrictInt
    offset: Optional[StrictInt] = None

    def render(self) -> str:
        return _call("tail", ("n", str(self.n)), ("offset", _optional(self.offset, str)))


class Contains(Stage):
    """
    Tests whether `value` is a member of `values` (rendered as `set:`).

    The value and every set element must share one scalar kind. Native
    Python values are converted with
    [`TypeValue.from_value()`][influxkit.models.query.values.TypeValue.from_value].
    """

    value: TypeValue
    values: List[TypeValue]

    @field_validator("value", mode="before")
    @classmethod
    def _convert_value(cls, v: Any) -> Any:
        return TypeValue.from_value(v)

    @field_validator("values", mode="before")
    @classmethod
    def _convert_values(cls, v: Any) -> Any:
        if isinstance(v, (str, bytes)):
            raise ValueError("'values' must be a sequence of scalars, not a string")
        return [TypeValue.from_value(item) for item in v]

    @model_validator(mode="after")
    def _check_kinds(self):
        mismatched = [item for item in self.values if item.kind is not self.value.kind]
        if mismatched:
            raise ValueError(
                f"contains() set elements must be of kind '{self.value.kind.name}', "
                f"got {[item.kind.name for item in mismatched]}"
            )
        return self

    def render(self) -> str:
        rendered = "[" + ", ".join(item.render() for item in self.values) + "]"
        return _call("contains", ("value", self.value.render()), ("set", rendered))


class Distinct(Stage):
    column: str

    def render(self) -> str:
        return _call("distinct", ("column", quote(self.column)))


class Max(Stage):
    def render(self) -> str:
        return "max()"


class Min(Stage):
    def render(self) -> str:
        return "min()"


class Limit(Stage):
    n: StrictInt
    offset: Optional[StrictInt] = None

    def render(self) -> str:
        return _call("limit", ("n", str(self.n)), ("offset", _optional(self.offset, str)))


class Set(Stage):
    """Assigns a constant string `value` to column `key` in every record."""

    key: str
    value: str

    def render(self) -> str:
        return _call("set", ("key", quote(self.key)), ("value", quote(self.value)))


class Sort(Stage):
    columns: Optional[List[str]] = None
    desc: Optional[bool] = None

    def render(self) -> str:
        return _call(
            "sort",
            ("columns", _optional(self.columns, _quoted_list)),
            ("desc", _optional(self.desc, _render_bool)),
        )


class Count(Stage):
    column: Optional[str] = None

    def render(self) -> str:
        return _call("count", ("column", _optional(self.column, quote)))


class Buckets(Stage):
    """Lists the buckets of the organization."""

    def render(self) -> str:
        return "buckets()"


class Integral(Stage):
    """Computes the area under the curve per `unit` of time (e.g. `10s`)."""

    unit: str
    column: Optional[str] = None
    time_column: Optional[str] = None

    def render(self) -> str:
        return _call(
            "integral",
            ("unit", self.unit),
            ("column", _optional(self.column, quote)),
            ("timeColumn", _optional(self.time_column, quote)),
        )


class Duplicate(Stage):
    column: str
    as_name: str

    def render(self) -> str:
        return _call("duplicate", ("column", quote(self.column)), ("as", quote(self.as_name)))


class Keys(Stage):
    column: Optional[str] = None

    def render(self) -> str:
        return _call("keys", ("column", _optional(self.column, quote)))


class Pivot(Stage):
    row_key: List[str]
    column_key: List[str]
    value_column: str

    def render(self) -> str:
        return _call(
            "pivot",
            ("rowKey", _quoted_list(self.row_key)),
            ("columnKey", _quoted_list(self.column_key)),
            ("valueColumn", quote(self.value_column)),
        )
