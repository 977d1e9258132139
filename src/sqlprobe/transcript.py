"""Console transcript of the probes.

Each probe prints the statement it issued and the rows or counts that came
back, for an operator to check by eye. Output goes through a rich
``Console`` so tests can capture it with ``Console(file=io.StringIO())``.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console


class Transcript:
    """Human-readable record of the operations run against the server."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def heading(self, title: str) -> None:
        self.console.print()
        self.console.print(title, style="bold", markup=False)

    def query(self, sql: str) -> None:
        self.console.print(f"Query: {sql}", markup=False)

    def row(self, label: str, row: tuple[Any, ...]) -> None:
        row_id, data = row[0], row[1]
        self.console.print(f"{label} got tuple: id: {row_id}, data: {data}", markup=False)

    def line(self, text: str) -> None:
        self.console.print(text, markup=False)


__all__ = ["Transcript"]
