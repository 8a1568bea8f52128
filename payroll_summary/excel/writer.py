from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.report_variant import ReportRow, ReportVariant
from ..services.grouping import is_summary_row, is_valid_group_key
from ..services.normalize import is_number, truncate_time

"""Report export to .xlsx.

One worksheet per group key (first appearance order). Each worksheet holds the
variant header, the group's data rows, then its summary rows. Summary rows are
recognised by their sentinel text only. Note overrides fill the note column;
numeric shift start / end cells are truncated. Styling is left to the consumer.
"""

__all__ = [
    "SHEET_NAME_MAX",
    "sheet_title",
    "group_rows",
    "prepare_sheet_rows",
    "write_report",
]

SHEET_NAME_MAX = 31  # Excel limit
_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")
SHIFT_COLUMNS = (5, 6)


def sheet_title(key: Any, used: set[str]) -> str:
    """Excel-safe, unique worksheet title for a group key."""
    base = _INVALID_SHEET_CHARS.sub("_", str(key)).strip("'")[:SHEET_NAME_MAX] or "Sheet"
    title = base
    n = 2
    while title.lower() in used:
        suffix = f" ({n})"
        title = base[: SHEET_NAME_MAX - len(suffix)] + suffix
        n += 1
    used.add(title.lower())
    return title


def group_rows(rows: Sequence[ReportRow], variant: ReportVariant) -> dict[Any, list[ReportRow]]:
    """Bucket report rows by their key cell; rows without a key are dropped.

    A summary row belongs to the group of the data rows it closes (it is always
    emitted right after them), whatever column its key is printed in.
    """
    groups: dict[Any, list[ReportRow]] = {}
    current: Any = None
    for row in rows:
        if is_summary_row(row.cells):
            if current is not None:
                groups[current].append(row)
            continue
        key = row.cells[variant.key_column] if len(row.cells) > variant.key_column else None
        if not is_valid_group_key(key):
            continue
        groups.setdefault(key, []).append(row)
        current = key
    return groups


def prepare_sheet_rows(
    rows: Sequence[ReportRow],
    variant: ReportVariant,
    notes: Mapping[int, str] | None = None,
) -> list[list[Any]]:
    """Data rows first (with notes applied), then summary rows; width = header width."""
    notes = notes or {}
    width = len(variant.headers)
    data: list[list[Any]] = []
    summaries: list[list[Any]] = []
    for row in rows:
        cells = list(row.cells[:width]) + [None] * (width - len(row.cells))
        if is_summary_row(cells):
            summaries.append(cells)
            continue
        note = notes.get(row.row_id) if row.row_id is not None else None
        if note:
            cells[variant.note_column] = note
        for idx in SHIFT_COLUMNS:
            if is_number(cells[idx]) and cells[idx]:
                cells[idx] = truncate_time(cells[idx])
        data.append(cells)
    return data + summaries


def write_report(
    path: Path,
    rows: Sequence[ReportRow],
    variant: ReportVariant,
    notes: Mapping[int, str] | None = None,
) -> list[str]:
    """Write ``rows`` to ``path``; returns the worksheet titles written."""
    path.parent.mkdir(parents=True, exist_ok=True)
    groups = group_rows(rows, variant)
    used: set[str] = set()
    titles: list[str] = []
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        if not groups:
            # openpyxl は空ブックを保存できないのでヘッダのみのシートを出力
            pd.DataFrame([], columns=list(variant.headers)).to_excel(
                writer, sheet_name=sheet_title(variant.title, used), index=False
            )
            return titles
        for key, members in groups.items():
            title = sheet_title(key, used)
            df = pd.DataFrame(prepare_sheet_rows(members, variant, notes), columns=list(variant.headers))
            df.to_excel(writer, sheet_name=title, index=False)
            titles.append(title)
    return titles
