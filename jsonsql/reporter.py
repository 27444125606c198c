from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from jsonsql.completion import sample_to_text
from jsonsql.domain.models import ColumnDescriptor, QueryOutcome
from jsonsql.domain.values import EmptyMarker
from jsonsql.infrastructure.abstract import Readiness

_READINESS_STYLE = {
    Readiness.NOT_STARTED: ("dim", "Engine not started"),
    Readiness.INITIALIZING: ("yellow", "Initializing..."),
    Readiness.READY: ("green", "Engine Ready"),
    Readiness.FAILED: ("red", "Engine failed to start"),
}


def format_cell(value: Any) -> str:
    """
    Render one result cell.

    NULL for missing values, JSON for nested values, TRUE/FALSE for booleans.
    """
    if value is None:
        return "NULL"
    if isinstance(value, EmptyMarker):
        value = value.to_json()
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def readiness_markup(state: Readiness) -> str:
    style, label = _READINESS_STYLE[state]
    return f"[{style}]●[/{style}] {label}"


def print_readiness(state: Readiness, console: Optional[Console] = None) -> None:
    (console or Console()).print(readiness_markup(state))


def print_columns(
    schema: Sequence[ColumnDescriptor],
    console: Optional[Console] = None,
    table_name: str = "t",
) -> None:
    """
    Render the column list: name, type and sample of every column.
    """
    console = console or Console()

    if not schema:
        console.print("[yellow]No columns. Load some JSON first.[/yellow]")
        return

    table = Table(title=f"Columns of {escape(table_name)}", box=box.ROUNDED)
    table.add_column("Column", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Sample", style="dim")

    for column in schema:
        table.add_row(escape(column.name), str(column.type), escape(sample_to_text(column.sample)))

    console.print(table)


def print_error(message: str, console: Optional[Console] = None) -> None:
    (console or Console()).print(
        Panel(escape(message), title="Error", title_align="left", border_style="red")
    )


def print_result(outcome: QueryOutcome, console: Optional[Console] = None) -> None:
    """
    Render a query outcome as a result grid, or as an error banner when the
    engine rejected the query.
    """
    console = console or Console()

    if not outcome.ok:
        print_error(outcome.error or "", console)
        return

    if not outcome.rows:
        console.print("[dim]No results or no query executed.[/dim]")
        return

    table = Table(
        box=box.SIMPLE_HEAVY,
        caption=f"{len(outcome.rows):,} row(s) in {outcome.duration_ms:.1f} ms",
    )
    columns = outcome.columns or list(outcome.rows[0].keys())
    for name in columns:
        table.add_column(escape(name), overflow="fold")

    for row in outcome.rows:
        table.add_row(*(escape(format_cell(row.get(name))) for name in columns))

    console.print(table)


__all__ = [
    "format_cell",
    "print_columns",
    "print_error",
    "print_readiness",
    "print_result",
    "readiness_markup",
]
