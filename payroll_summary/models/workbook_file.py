from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

"""WorkbookFile domain model and FileStatus enum.

The WorkbookFile represents the processing context for a single timesheet workbook,
tracking its status from pending to success/failed and the report files produced.
"""


class FileStatus(Enum):
    """Status enum for WorkbookFile processing lifecycle.

    State transitions: pending → processing → (success | failed)
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class WorkbookFile:
    """Processing context for a single timesheet workbook."""
    path: Path                           # Full path to the workbook
    name: str                            # File name
    sheet: str | None = None             # Worksheet the reports were built from
    start_time: datetime | None = None   # Processing start (UTC)
    end_time: datetime | None = None     # Processing end (UTC)
    status: FileStatus = FileStatus.PENDING
    data_rows: int = 0                   # Loaded data rows (header excluded)
    summary_groups: int = 0              # Summary rows emitted over all reports
    reports: list[Path] = field(default_factory=list)  # Written report files
    error: str | None = None             # Failure reason summary
