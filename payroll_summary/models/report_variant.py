from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Report variant descriptor and report row models.

The four payroll reports share one grouping engine. Everything that differs between
them (column slice, group key, summed columns, summary layout, annotation column)
is captured by a ReportVariant value.
"""

__all__ = [
    "GroupBy",
    "Layout",
    "ReportRow",
    "ReportVariant",
]


class GroupBy(Enum):
    """Group key of a report: the date column or the worker name column."""
    DATE = "date"
    NAME = "name"


class Layout(Enum):
    """Column layout of a report.

    - PRIMARY: 9-column slice (code, name, date, PDA pont, pont 2, shift start,
      shift end, total hours, note)
    - SECONDARY: 7-column slice (code, name, date, overtime, points, shift start,
      shift end) plus an empty note slot
    """
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class ReportVariant:
    """Descriptor driving the grouping engine for one report."""
    name: str  # CLI / config identifier (e.g. "by-date")
    title: str  # 表示名 (download file title)
    layout: Layout
    group_by: GroupBy
    column_start: int  # slice of the canonical 16-column row
    column_stop: int
    sum_columns: tuple[int, ...]  # 集計対象列 (slice-relative)
    multiplier_column: int  # fixed annotation column; also the override key column
    headers: tuple[str, ...]
    shifted_trailing_summary: bool = False

    @property
    def key_column(self) -> int:
        return 2 if self.group_by is GroupBy.DATE else 1

    @property
    def payment_column(self) -> int:
        return self.multiplier_column + 1

    @property
    def note_column(self) -> int:
        return self.multiplier_column - 1


@dataclass(frozen=True)
class ReportRow:
    """One emitted report row.

    Summary rows carry ``row_id=None``; consumers still recognise them by the
    sentinel text in their cells, never by this attribute.
    """
    cells: list[Any]
    row_id: int | None = None
