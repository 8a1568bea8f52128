from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for a report run.

Format:
SUMMARY files={total}/{total} success={success} failed={failed} rows={rows}
groups={groups} reports={reports} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line from a ProcessingResult.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2025, 6, 19, 8, 0, 0, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_rows=12, total_groups=3,
        ...     reports_written=4, start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 rows=12 groups=3 reports=4 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"groups={result.total_groups} "
        f"reports={result.reports_written} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
