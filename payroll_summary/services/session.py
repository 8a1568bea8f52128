from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..models.config_models import DEFAULT_HFEX_MULTIPLIER, DEFAULT_SRBN_MULTIPLIER, WorkbookEdits
from ..models.report_variant import ReportRow, ReportVariant
from ..models.row_data import SourceRow
from .variants import VARIANTS, build_report, get_variant

logger = logging.getLogger(__name__)

"""Report session: one loaded dataset plus its ephemeral operator edits.

State held per dataset:
- rows (with ingestion row ids)
- global multipliers (SRBN / HF-EX)
- individual multiplier overrides, keyed by (row_id, multiplier column)
- note overrides, keyed by (row_id, note column)
- current row selection for bulk edits

Edits arrive either one call at a time or as a WorkbookEdits bundle read from the
overrides file (apply_edits), where rows are addressed by worksheet row number.

Reports are recomputed from scratch on every call; nothing is cached between calls.
Loading or clearing a dataset resets rows and both override maps together.
"""

__all__ = [
    "load_dataset",
    "ReportSession",
]


def load_dataset(sheet_rows: Sequence[Sequence[Any]]) -> list[SourceRow]:
    """Turn decoded worksheet rows into SourceRows.

    Row 0 is the header and is skipped; every other row keeps its worksheet index
    as a persistent row_id.
    """
    return [
        SourceRow(row_id=index, cells=list(cells))
        for index, cells in enumerate(sheet_rows)
        if index > 0
    ]


def _variant(variant: ReportVariant | str) -> ReportVariant:
    return get_variant(variant) if isinstance(variant, str) else variant


class ReportSession:
    """Ephemeral per-dataset report state (not persisted)."""

    def __init__(
        self,
        srbn_multiplier: float = DEFAULT_SRBN_MULTIPLIER,
        hfex_multiplier: float = DEFAULT_HFEX_MULTIPLIER,
    ) -> None:
        self._default_srbn = srbn_multiplier
        self._default_hfex = hfex_multiplier
        self.srbn_multiplier = srbn_multiplier
        self.hfex_multiplier = hfex_multiplier
        self._rows: list[SourceRow] = []
        self._multipliers: dict[tuple[int, int], float] = {}
        self._notes: dict[tuple[int, int], str] = {}
        self._selection: set[tuple[int, int]] = set()

    # -- dataset lifecycle -------------------------------------------------
    @property
    def rows(self) -> list[SourceRow]:
        return list(self._rows)

    @property
    def multiplier_overrides(self) -> dict[tuple[int, int], float]:
        return dict(self._multipliers)

    @property
    def note_overrides(self) -> dict[tuple[int, int], str]:
        return dict(self._notes)

    @property
    def selection(self) -> set[tuple[int, int]]:
        return set(self._selection)

    def load(self, sheet_rows: Sequence[Sequence[Any]]) -> int:
        """Replace the dataset; overrides and selection are dropped with it."""
        rows = load_dataset(sheet_rows)
        self._rows = rows
        self._multipliers = {}
        self._notes = {}
        self._selection = set()
        logger.debug("session: loaded %d data rows", len(rows))
        return len(rows)

    def clear(self) -> None:
        """Drop the dataset and every edit; multipliers return to the session defaults."""
        self._rows = []
        self._multipliers = {}
        self._notes = {}
        self._selection = set()
        self.srbn_multiplier = self._default_srbn
        self.hfex_multiplier = self._default_hfex

    # -- edits --------------------------------------------------------------
    def set_multipliers(self, srbn: float | None = None, hfex: float | None = None) -> None:
        if srbn is not None:
            self.srbn_multiplier = srbn
        if hfex is not None:
            self.hfex_multiplier = hfex

    def set_row_multiplier(self, variant: ReportVariant | str, row_id: int, value: float) -> None:
        v = _variant(variant)
        self._multipliers[(row_id, v.multiplier_column)] = value

    def set_note(self, variant: ReportVariant | str, row_id: int, text: str) -> None:
        v = _variant(variant)
        self._notes[(row_id, v.note_column)] = text

    def notes_for(self, variant: ReportVariant | str) -> dict[int, str]:
        """row_id -> note for the variant's note column."""
        v = _variant(variant)
        return {rid: text for (rid, col), text in self._notes.items() if col == v.note_column}

    # -- selection / bulk ---------------------------------------------------
    def select_rows(self, variant: ReportVariant | str, row_ids: Iterable[int]) -> None:
        v = _variant(variant)
        self._selection.update((rid, v.multiplier_column) for rid in row_ids)

    def select_all(self, variant: ReportVariant | str) -> set[tuple[int, int]]:
        """Select every data row of the variant's current report (summary rows excluded)."""
        v = _variant(variant)
        self._selection = {
            (r.row_id, v.multiplier_column) for r in self.report(v) if r.row_id is not None
        }
        return set(self._selection)

    def clear_selection(self) -> None:
        self._selection = set()

    def apply_bulk_multiplier(self, value: float | None) -> int:
        """Set ``value`` on every selected row, then clear the selection.

        No-op (returns 0) with an empty selection or a zero / missing value.
        """
        if not self._selection or not value:
            return 0
        for key in self._selection:
            self._multipliers[key] = value
        applied = len(self._selection)
        self._selection = set()
        logger.debug("session: bulk multiplier %s applied to %d rows", value, applied)
        return applied

    def apply_edits(self, edits: WorkbookEdits) -> int:
        """Apply a bundle of file-based edits to the loaded dataset.

        Bulk entries go first so that a row entry for the same row wins. Worksheet
        row numbers that are not in the dataset are logged and skipped.

        Returns:
            Number of rows that received an edit
        """
        known = {r.row_id for r in self._rows}
        applied = 0

        for bulk in edits.bulk:
            self.clear_selection()
            if bulk.rows is None:
                self.select_all(bulk.report)
            else:
                row_ids = [n - 1 for n in bulk.rows]  # ヘッダーが1行目
                for n in bulk.rows:
                    if n - 1 not in known:
                        logger.warning("edits: row %d not in sheet, skipped (%s)", n, bulk.report)
                self.select_rows(bulk.report, [rid for rid in row_ids if rid in known])
            applied += self.apply_bulk_multiplier(bulk.multiplier)
        self.clear_selection()

        for edit in edits.rows:
            row_id = edit.row - 1
            if row_id not in known:
                logger.warning("edits: row %d not in sheet, skipped (%s)", edit.row, edit.report)
                continue
            if edit.multiplier is not None:
                self.set_row_multiplier(edit.report, row_id, edit.multiplier)
            if edit.note is not None:
                self.set_note(edit.report, row_id, edit.note)
            applied += 1
        return applied

    # -- reports ------------------------------------------------------------
    def report(self, variant: ReportVariant | str) -> list[ReportRow]:
        return build_report(
            self._rows,
            _variant(variant),
            self.srbn_multiplier,
            self.hfex_multiplier,
            self._multipliers,
        )

    def reports(self, names: Iterable[str] | None = None) -> dict[str, list[ReportRow]]:
        selected = list(names) if names is not None else list(VARIANTS)
        return {name: self.report(name) for name in selected}
