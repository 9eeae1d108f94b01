"""
This module provides the high-level "Fluent" API for building Flux pipeline queries.

A [`Query`][influxkit.models.query.builders.Query] is an ordered sequence of
pipeline steps. Steps are appended with [`then()`][influxkit.models.query.builders.Query.then]
(raw text or any [stage descriptor][influxkit.models.query.stages]) or with
the per-stage helper methods, and the whole pipeline renders to a single
string joined by the pipe-forward operator:

```
from(bucket: "server")
 |> range(start: 100, stop: 200)
 |> filter(fn: (r) => r._measurement == "cpu", onEmpty: "drop")
```

Queries are immutable: every append returns a new `Query` and leaves the
receiver unchanged, so a common prefix can be shared between queries.
"""

from typing import Any, Iterable, List, Optional, Tuple, Union

from ...enum import GroupMode, OnEmpty
from ...logging_config import get_logger
from .protocols import StageProtocol
from .stages import (
    Buckets,
    Contains,
    Count,
    Distinct,
    Drop,
    Duplicate,
    Filter,
    From,
    Group,
    Integral,
    Keep,
    Keys,
    Limit,
    Max,
    Min,
    Pivot,
    Range,
    RangeBound,
    Set,
    Sort,
    Tail,
    Yield,
)

# Set the hierarchical logger
logger = get_logger(__name__)

PIPE_SEPARATOR = "\n |> "
"""Separator placed between two consecutive pipeline steps."""

StageLike = Union[str, StageProtocol]


def _render_stage(stage: StageLike) -> str:
    if isinstance(stage, str):
        return stage
    if isinstance(stage, StageProtocol):
        return stage.render()
    raise TypeError(
        f"Invalid stage type. Expected 'str' or a stage with 'render()', but got '{type(stage).__name__}'."
    )


class Query:
    """
    An ordered, immutable Flux pipeline.

    Example:
        ```python
        from influxkit import Query, OnEmpty

        query = (
            Query()
            .from_("server")
            .range(start=100, stop=200)
            .filter('(r) => r["_measurement"] == "handle_request"', on_empty=OnEmpty.Drop)
        )
        print(query.to_flux())
        # from(bucket: "server")
        #  |> range(start: 100, stop: 200)
        #  |> filter(fn: (r) => r["_measurement"] == "handle_request", onEmpty: "drop")
        ```
    """

    def __init__(self, *stages: StageLike):
        """
        Initializes the query with an optional list of initial steps.

        Args:
            *stages: Raw step strings (e.g. `'from(bucket: "b")'`) or stage
                descriptors, in pipeline order.

        Raises:
            TypeError: If a stage is neither a string nor renderable.
        """
        self._lines: Tuple[str, ...] = tuple(_render_stage(s) for s in stages)

    @classmethod
    def _from_lines(cls, lines: Iterable[str]) -> "Query":
        query = cls.__new__(cls)
        query._lines = tuple(lines)
        return query

    @classmethod
    def raw(cls, query: str) -> "Query":
        """
        Creates a query from an existing pipe-chained Flux text.

        Each line becomes one step: surrounding whitespace and a leading `|>`
        are removed, blank lines are ignored.

        Example:
            ```python
            query = Query.raw('''from(bucket: "server")
                |> range(start: v.timeRangeStart, stop: v.timeRangeStop)
                |> filter(fn: (r) => r["_measurement"] == "example_measurement")
                |> keys()''')
            len(query)  # 4
            ```
        """
        lines: List[str] = []
        for line in query.splitlines():
            line = line.strip()
            if line.startswith("|>"):
                line = line[2:].strip()
            if line:
                lines.append(line)
        logger.debug(f"Parsed raw query into {len(lines)} pipeline steps")
        return cls._from_lines(lines)

    @property
    def lines(self) -> Tuple[str, ...]:
        """The rendered pipeline steps, in order."""
        return self._lines

    def then(self, stage: StageLike) -> "Query":
        """
        Returns a new query with `stage` appended as the last step.

        Args:
            stage: A raw step string or a stage descriptor.
        """
        return self._from_lines(self._lines + (_render_stage(stage),))

    # --- Stage helpers ---

    def from_(self, bucket: str) -> "Query":
        """Appends `from(bucket: ...)`."""
        return self.then(From(bucket=bucket))

    def range(self, start: RangeBound, stop: Optional[RangeBound] = None) -> "Query":
        """Appends `range(start: ..., stop: ...)`. See [`Range`][influxkit.models.query.stages.Range]."""
        return self.then(Range(start=start, stop=stop))

    def filter(self, fn: str, on_empty: Optional[OnEmpty] = None) -> "Query":
        """Appends `filter(fn: ...)` with the pre-formatted predicate `fn`."""
        return self.then(Filter(fn=fn, on_empty=on_empty))

    def group(self, columns: List[str], mode: Optional[GroupMode] = None) -> "Query":
        return self.then(Group(columns=columns, mode=mode))

    def yield_(self, name: str) -> "Query":
        return self.then(Yield(name=name))

    def keep(self, columns: Optional[List[str]] = None, fn: Optional[str] = None) -> "Query":
        """
        Appends `keep()`.

        Raises:
            ValueError: Unless exactly one of `columns` and `fn` is given.
        """
        return self.then(Keep(columns=columns, fn=fn))

    def drop(self, columns: Optional[List[str]] = None, fn: Optional[str] = None) -> "Query":
        """
        Appends `drop()`.

        Raises:
            ValueError: Unless exactly one of `columns` and `fn` is given.
        """
        return self.then(Drop(columns=columns, fn=fn))

    def tail(self, n: int, offset: Optional[int] = None) -> "Query":
        return self.then(Tail(n=n, offset=offset))

    def contains(self, value: Any, values: List[Any]) -> "Query":
        """
        Appends `contains(value: ..., set: [...])`.

        Raises:
            ValueError: If the set elements are not all of the same kind as `value`.
        """
        return self.then(Contains(value=value, values=values))

    def distinct(self, column: str) -> "Query":
        return self.then(Distinct(column=column))

    def max(self) -> "Query":
        return self.then(Max())

    def min(self) -> "Query":
        return self.then(Min())

    def limit(self, n: int, offset: Optional[int] = None) -> "Query":
        return self.then(Limit(n=n, offset=offset))

    def set(self, key: str, value: str) -> "Query":
        return self.then(Set(key=key, value=value))

    def sort(self, columns: Optional[List[str]] = None, desc: Optional[bool] = None) -> "Query":
        return self.then(Sort(columns=columns, desc=desc))

    def count(self, column: Optional[str] = None) -> "Query":
        return self.then(Count(column=column))

    def buckets(self) -> "Query":
        return self.then(Buckets())

    def integral(
        self,
        unit: str,
        column: Optional[str] = None,
        time_column: Optional[str] = None,
    ) -> "Query":
        return self.then(Integral(unit=unit, column=column, time_column=time_column))

    def duplicate(self, column: str, as_name: str) -> "Query":
        return self.then(Duplicate(column=column, as_name=as_name))

    def keys(self, column: Optional[str] = None) -> "Query":
        return self.then(Keys(column=column))

    def pivot(self, row_key: List[str], column_key: List[str], value_column: str) -> "Query":
        return self.then(
            Pivot(row_key=row_key, column_key=column_key, value_column=value_column)
        )

    # --- Rendering ---

    def to_flux(self) -> str:
        """
        Renders the pipeline: steps joined by `"\\n |> "`. An empty query renders to `""`.
        """
        return PIPE_SEPARATOR.join(self._lines)

    def __str__(self) -> str:
        return self.to_flux()

    def __repr__(self) -> str:
        return f"Query{self._lines!r}"

    def __len__(self) -> int:
        return len(self._lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Query):
            return NotImplemented
        return self._lines == other._lines

    def __hash__(self) -> int:
        return hash(self._lines)
