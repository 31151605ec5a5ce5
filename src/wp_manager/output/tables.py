"""Rich table rendering helpers."""

from __future__ import annotations

from typing import Any, Sequence

from rich.table import Table
from rich.text import Text

STATUS_STYLES = {
    "online": "green",
    "offline": "red",
    "pending": "yellow",
    "error": "bold red",
    "no-plugin": "magenta",
    "active": "green",
    "inactive": "dim",
    "ok": "green",
    "failed": "red",
}

# Columns whose values are colored by STATUS_STYLES
STYLED_COLUMNS = frozenset({"Status", "Result"})


def styled(value: Any) -> Text:
    """Render a status-like value with its color."""
    text = str(value) if value is not None else ""
    return Text(text, style=STATUS_STYLES.get(text, ""))


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    show_lines: bool = False,
) -> Table:
    """Build a Rich Table from column headers and row data."""
    table = Table(title=title, show_lines=show_lines)
    for col in columns:
        table.add_column(col, no_wrap=col in STYLED_COLUMNS)
    for row in rows:
        cells: list[Any] = []
        for col, cell in zip(columns, row):
            if col in STYLED_COLUMNS:
                cells.append(styled(cell))
            else:
                cells.append(Text(str(cell)) if cell is not None else "")
        table.add_row(*cells)
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a key-value dict as a two-column table."""
    table = Table(title=title, show_header=False, show_lines=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, styled(value) if key == "status" else Text(str(value) if value is not None else ""))
    return table
