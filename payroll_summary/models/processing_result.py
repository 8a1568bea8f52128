from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for the timesheet payroll summary tool.

Aggregated results of one run over the source directory; feeds the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics (internal helper for ProcessingResult)."""
    file_name: str  # ファイル名
    status: str  # success/failed
    data_rows: int  # 読込データ行数
    summary_groups: int  # 出力された集計行数
    reports_written: int
    elapsed_seconds: float  # ファイル処理時間


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results and summary output for a report run."""
    success_files: int
    failed_files: int
    total_rows: int  # 総データ行数
    total_groups: int  # 総集計行数
    reports_written: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
