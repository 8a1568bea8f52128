from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

"""Run progress on the terminal (tqdm, TTY only).

One bar counts workbooks; its postfix carries the running success / failed / rows
tally. Each finished report gets its own line above the bar via tqdm.write.
Nothing is printed when stdout is not a TTY (CI, pipes), so the labeled log lines
stay the only output there.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress bar over the workbooks of one run."""

    def __init__(self, total_files: int, *, description: str = "Building reports") -> None:
        self.description = description
        self.success = 0
        self.failed = 0
        self.rows = 0
        self.pbar: Any = None
        if is_tty_enabled():
            self.pbar = tqdm(total=total_files, desc=description, unit="file", ncols=80, ascii=True)

    def start_file(self, file_path: Path) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def report_done(self, report: str, rows: int, success: bool = True) -> None:
        if self.pbar is not None:
            tqdm.write(f"  {report}: {rows} rows" if success else f"  {report}: failed")

    def finish_file(self, success: bool, rows: int = 0) -> None:
        """Count the workbook; ``rows`` is added to the tally only on success."""
        if success:
            self.success += 1
            self.rows += rows
        else:
            self.failed += 1
        if self.pbar is not None:
            self.pbar.set_postfix(success=self.success, failed=self.failed, rows=self.rows)
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
