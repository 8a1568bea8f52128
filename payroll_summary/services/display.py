from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.report_variant import Layout, ReportRow, ReportVariant
from .grouping import is_summary_row
from .normalize import format_decimal, format_display_date, is_number, truncate_time

"""Table-view rendering of report rows (used by the CLI --preview output).

Primary layout:   5/6 -> time of day, 3/4/10 -> rounded, 7 -> truncated hours
Secondary layout: 5/6 -> date + time, 3/4/9 -> rounded
Summary rows are shown as emitted.
"""

PAYMENT_SUFFIX = " Ft"


def _render_cell(cell: Any, index: int, layout: Layout) -> Any:
    if layout is Layout.PRIMARY:
        if index in (5, 6):
            return format_display_date(cell)
        if index in (3, 4):
            return format_decimal(cell)
        if index == 10:
            return f"{format_decimal(cell)}{PAYMENT_SUFFIX}"
        if index == 7:
            return truncate_time(cell) if is_number(cell) else (cell if cell is not None else "")
    else:
        if index in (3, 4, 9):
            return format_decimal(cell)
        if index in (5, 6):
            return format_display_date(cell, include_time=True)
    return cell if cell is not None else ""


def display_row(cells: Sequence[Any], variant: ReportVariant) -> list[Any]:
    if is_summary_row(cells):
        return ["" if c is None else c for c in cells]
    return [_render_cell(c, i, variant.layout) for i, c in enumerate(cells)]


def render_table(rows: Sequence[ReportRow], variant: ReportVariant) -> str:
    """Plain text table: header line then one tab-separated line per row."""
    lines = ["\t".join(variant.headers)]
    for row in rows:
        lines.append("\t".join(str(c) for c in display_row(row.cells, variant)))
    return "\n".join(lines)
