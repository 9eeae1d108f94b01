"""
influxkit SDK: Composing Flux Queries.

This script shows the three ways of assembling a pipeline query:
1. The fluent stage helpers.
2. Stage descriptors (and custom stages exposing `render()`) appended with `then()`.
3. Parsing an existing pipe-chained query text with `Query.raw()` and extending it.

The rendered text is the body posted to the query endpoint with the
`application/vnd.flux` content type.
"""

from datetime import datetime, timezone

from rich.console import Console
from rich.panel import Panel

from influxkit import Filter, GroupMode, OnEmpty, Pivot, Query

console = Console()


class AggregateWindow:
    """A stage not covered by the SDK: any object with `render()` is accepted."""

    def __init__(self, every: str, fn: str):
        self.every = every
        self.fn = fn

    def render(self) -> str:
        return f"aggregateWindow(every: {self.every}, fn: {self.fn})"


def show(title: str, query: Query):
    console.print(Panel(f"[bold green]{title}[/bold green]"))
    console.print(query.to_flux(), markup=False, highlight=False)


def run():
    # A shared prefix: queries are immutable, so it can be reused safely
    base = (
        Query()
        .from_("server")
        .range(
            start=datetime(2020, 10, 10, tzinfo=timezone.utc),
            stop=datetime(2020, 10, 11, tzinfo=timezone.utc),
        )
    )

    requests = base.filter(
        '(r) => r["_measurement"] == "handle_request"', on_empty=OnEmpty.Drop
    ).then(AggregateWindow(every="1h", fn="mean"))
    show("Fluent helpers", requests)

    table = (
        base.then(Filter(fn='(r) => r["_measurement"] == "cpu"'))
        .then(Pivot(row_key=["_time"], column_key=["_field"], value_column="_value"))
        .group(["host"], mode=GroupMode.By)
        .contains(value="server01", values=["server01", "server02"])
        .sort(["_time"], desc=True)
        .limit(10)
    )
    show("Stage descriptors", table)

    raw = Query.raw(
        """from(bucket: "server")
            |> range(start: v.timeRangeStart, stop: v.timeRangeStop)
            |> filter(fn: (r) => r["_measurement"] == "example_measurement")"""
    )
    show("Raw query, extended", raw.keys().yield_("keys"))


if __name__ == "__main__":
    run()
