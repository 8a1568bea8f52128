from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""SourceRow model for the timesheet payroll summary tool.

A SourceRow is one data row of a decoded worksheet. The row_id is assigned once at
ingestion (the row's index in the worksheet, header = 0) and stays fixed for the
lifetime of the loaded dataset, so multiplier / note overrides survive re-sorting
and re-filtering of the report views.
"""

__all__ = [
    "SourceRow",
]


@dataclass(frozen=True)
class SourceRow:
    """Logical representation of a single worksheet data row."""
    row_id: int  # ワークシート上の行番号 (ヘッダ = 0, 1行目データ = 1)
    cells: list[Any] = field(default_factory=list)

    def cell(self, index: int) -> Any:
        """Return the cell at ``index`` or None for ragged rows."""
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return None

    def sliced(self, start: int, stop: int) -> SourceRow:
        """Project the row onto the column range ``[start, stop)`` keeping its id."""
        return SourceRow(row_id=self.row_id, cells=list(self.cells[start:stop]))
