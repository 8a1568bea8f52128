from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

"""Config dataclasses for the timesheet payroll summary tool.

These are the typed results of config loading (payroll_summary/config/loader.py);
the loader validates the raw YAML against the JSON schema and then builds them.
"""

DEFAULT_SRBN_MULTIPLIER = 2.9
DEFAULT_HFEX_MULTIPLIER = 3.1

ALL_REPORTS = ("by-date", "detailed-by-date", "by-name", "detailed-by-name")


@dataclass(frozen=True)
class MultiplierConfig:
    """Global pay multipliers applied by the worker-name rule.

    Environment variables (PAYROLL_SRBN_MULTIPLIER / PAYROLL_HFEX_MULTIPLIER) and CLI
    flags take precedence over these values; see cli.__main__.
    """
    srbn: float = DEFAULT_SRBN_MULTIPLIER
    hfex: float = DEFAULT_HFEX_MULTIPLIER


@dataclass(frozen=True)
class RowEdit:
    """Individual multiplier and/or note for one worksheet row of one report."""
    row: int  # worksheet row number as shown in Excel (header = 1)
    report: str
    multiplier: float | None = None
    note: str | None = None


@dataclass(frozen=True)
class BulkEdit:
    """One multiplier applied to a set of rows of one report (None = every data row)."""
    report: str
    multiplier: float
    rows: tuple[int, ...] | None = None


@dataclass(frozen=True)
class WorkbookEdits:
    """Operator edits for one workbook; bulk entries are applied before row entries."""
    rows: tuple[RowEdit, ...] = ()
    bulk: tuple[BulkEdit, ...] = ()


@dataclass(frozen=True)
class ReportConfig:
    """Root configuration object for a report run."""
    source_directory: str  # Directory scanned for .xlsx / .xls workbooks (non-recursive)
    output_directory: str  # Reports are written to <output_directory>/<workbook stem>/
    sheet: str | None = None  # None = 先頭シート
    multipliers: MultiplierConfig = field(default_factory=MultiplierConfig)
    reports: tuple[str, ...] = ALL_REPORTS
    # workbook file name -> edits (from overrides_file)
    edits: Mapping[str, WorkbookEdits] = field(default_factory=dict)
