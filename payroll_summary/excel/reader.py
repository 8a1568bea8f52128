from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

"""Timesheet workbook decoding.

Each worksheet is read raw (header=None) and turned into a rectangular list of rows:
- row 0 is the header row (kept here; skipped by session.load_dataset)
- NaN -> None, numpy scalars -> Python scalars
- date / datetime cells -> spreadsheet date serials, time cells -> day fractions,
  so downstream code sees the same values a raw spreadsheet export would give
"""

__all__ = [
    "ENGINES",
    "SheetHeaderError",
    "WorkbookReadError",
    "read_excel_file",
    "normalize_cell",
    "sheet_rows",
    "read_workbook",
    "pick_sheet",
]

# 1899-12-30 = serial 0 (spreadsheet 1900 date system)
_SERIAL_EPOCH = datetime(1899, 12, 30)

# suffix -> pandas read engine
ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}


class SheetHeaderError(Exception):
    """Raised when a worksheet has no header row."""


class WorkbookReadError(Exception):
    """Raised when a workbook cannot be opened or parsed."""


def read_excel_file(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read a workbook returning raw DataFrames keyed by sheet name (workbook order)."""
    dfs: dict[str, pd.DataFrame] = {}
    try:
        xls = pd.ExcelFile(path, engine=ENGINES.get(path.suffix.lower(), "openpyxl"))
    except Exception as e:
        raise WorkbookReadError(f"cannot open workbook {path.name}: {e}") from e
    with xls:
        for name in xls.sheet_names:
            if target_sheets is not None and str(name) not in target_sheets:
                continue
            # ヘッダなしで生読み (ヘッダ行はデータと同じリストに残す)
            dfs[str(name)] = xls.parse(name, header=None)
    return dfs


def _to_serial(value: datetime) -> float:
    delta = value.replace(tzinfo=None) - _SERIAL_EPOCH
    return delta.days + delta.seconds / 86400 + delta.microseconds / 86400e6


def normalize_cell(value: Any) -> Any:
    """Convert one pandas cell to a plain Python value."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, np.generic):
        value = value.item()
        if isinstance(value, float) and math.isnan(value):
            return None
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        return _to_serial(value)
    if isinstance(value, date):
        return _to_serial(datetime(value.year, value.month, value.day))
    if isinstance(value, time):
        return (value.hour * 3600 + value.minute * 60 + value.second) / 86400
    if isinstance(value, float) and value.is_integer():
        # pandas は整数列を float 化することがある
        return int(value)
    return value


def sheet_rows(df: pd.DataFrame, sheet_name: str) -> list[list[Any]]:
    """Rectangular rows of a raw worksheet DataFrame (header row first)."""
    if df.shape[0] < 1:
        raise SheetHeaderError(f"sheet '{sheet_name}' is empty (no header row)")
    return [[normalize_cell(v) for v in raw] for raw in df.itertuples(index=False, name=None)]


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, list[list[Any]]]:
    """Decode a workbook into ``{sheet name: rows}``; empty sheets map to []."""
    out: dict[str, list[list[Any]]] = {}
    for name, df in read_excel_file(path, target_sheets=target_sheets).items():
        out[name] = [] if df.shape[0] == 0 else sheet_rows(df, name)
    return out


def pick_sheet(sheets: dict[str, list[list[Any]]], sheet: str | None) -> tuple[str, list[list[Any]]]:
    """Select the configured sheet, or the first one when none is configured."""
    if not sheets:
        raise SheetHeaderError("workbook has no worksheets")
    if sheet is None:
        name = next(iter(sheets))
        return name, sheets[name]
    if sheet not in sheets:
        raise SheetHeaderError(f"sheet '{sheet}' not found (available: {list(sheets)})")
    return sheet, sheets[sheet]
