"""Output formatters for the bands CLI."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

DATE_COLUMN = "date"


class OutputFormatter:
    """Base class for CLI output formatters."""

    name: str

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render rows as a Rich table; epoch-millisecond dates are shown as ISO days."""

    name: str = "table"
    no_color: bool = False

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        resolved = list(columns) if columns else (list(rows[0].keys()) if rows else [])

        table = Table(box=SIMPLE, show_lines=False, title=title)
        header_style = "" if self.no_color else "bold"
        for column in resolved:
            justify = "left" if column == DATE_COLUMN else "right"
            table.add_column(column, header_style=header_style, justify=justify)

        for row in rows:
            table.add_row(*(self._format_cell(column, row.get(column)) for column in resolved))

        if resolved:
            console.print(table)
        if not rows:
            console.print("No data available.")

    def _format_cell(self, column: str, value: object) -> str:
        if value is None:
            return "-"
        if column == DATE_COLUMN and isinstance(value, int):
            return datetime.fromtimestamp(value / 1000, UTC).strftime("%Y-%m-%d %H:%M")
        return str(value)


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """Render rows as JSON Lines, one object per record."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        for row in rows:
            selected = {column: row.get(column) for column in columns} if columns else dict(row)
            json.dump(selected, stream, ensure_ascii=False, default=str)
            stream.write("\n")
        stream.flush()


FORMATTERS = ("table", "jsonl")


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    msg = f"Unsupported format '{name}'. Available formats: {', '.join(FORMATTERS)}."
    raise ValueError(msg)


__all__ = ["FORMATTERS", "OutputFormatter", "TableFormatter", "JSONLFormatter", "create_formatter"]
