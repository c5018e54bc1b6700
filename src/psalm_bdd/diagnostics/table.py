from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import DiagnosticRecord

TABLE_HEADER: tuple[str, str] = ("type", "message")


def _escape_cell(value: str) -> str:
    return value.replace("\\", "\\\\").replace("|", "\\|").replace("\n", "\\n")


def render_rows(rows: Sequence[Sequence[str]]) -> str:
    """Render rows as a Gherkin data table, padding every column to its widest cell."""
    if not rows:
        return ""
    cells = [[_escape_cell(value) for value in row] for row in rows]
    widths = [max(len(row[index]) for row in cells) for index in range(len(cells[0]))]
    lines = [
        "| "
        + " | ".join(value.ljust(width) for value, width in zip(row, widths, strict=True))
        + " |"
        for row in cells
    ]
    return "\n".join(lines)


def render_diagnostics(records: Iterable[DiagnosticRecord]) -> str:
    rows: list[Sequence[str]] = [TABLE_HEADER]
    rows.extend((record.kind, record.message) for record in records)
    return render_rows(rows)
