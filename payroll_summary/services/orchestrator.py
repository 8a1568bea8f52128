from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import ENGINES, SheetHeaderError, WorkbookReadError, pick_sheet, read_workbook
from ..excel.writer import write_report
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import MultiplierConfig, ReportConfig
from ..models.processing_result import FileStat, ProcessingResult
from ..models.workbook_file import FileStatus, WorkbookFile
from .display import render_table
from .progress import ProgressTracker
from .session import ReportSession
from .variants import get_variant

logger = logging.getLogger(__name__)

"""Run orchestration for the timesheet payroll summary tool.

For every .xlsx / .xls workbook in the source directory:
1. decode the configured worksheet (first sheet by default)
2. load it into a fresh ReportSession and apply the edits configured for its file
   name (overrides_file)
3. build each configured report variant and write
   <output_directory>/<workbook stem>/<variant>.xlsx

A failing workbook is recorded in the error log and counted as failed; the run
continues with the next workbook.
"""


class ProcessingError(Exception):
    """Fatal run-level error (e.g. unreadable source directory)."""
    pass


def scan_excel_files(directory: Path) -> list[Path]:
    """Scan directory for .xlsx / .xls workbooks (non-recursive, sorted by name).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        # "~$" は Excel のロックファイル
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in ENGINES and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def load_session(path: Path, config: ReportConfig, multipliers: MultiplierConfig) -> tuple[str, ReportSession]:
    """Decode ``path`` and load its configured worksheet into a new session.

    Edits configured for the workbook's file name are applied before any report is built.
    """
    sheets = read_workbook(path)
    sheet_name, rows = pick_sheet(sheets, config.sheet)
    session = ReportSession(srbn_multiplier=multipliers.srbn, hfex_multiplier=multipliers.hfex)
    session.load(rows)
    edits = config.edits.get(path.name)
    if edits is not None:
        applied = session.apply_edits(edits)
        logger.info(f"{path.name}: {applied} row edits applied")
    return sheet_name, session


def preview_file(path: Path, config: ReportConfig, multipliers: MultiplierConfig, report: str) -> str:
    """Display-formatted text of one report for one workbook (nothing is written)."""
    variant = get_variant(report)
    _, session = load_session(path, config, multipliers)
    return render_table(session.report(variant), variant)


def process_all(
    config: ReportConfig,
    multipliers: MultiplierConfig | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Build and write the configured reports for every workbook.

    Args:
        config: Report configuration (directories, sheet, reports)
        multipliers: Effective global multipliers (defaults to config.multipliers)
        error_log: Buffer for per-file errors (a fresh one by default)

    Returns:
        ProcessingResult with aggregated counts and per-file stats

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    multipliers = multipliers or config.multipliers
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    file_paths = scan_excel_files(Path(config.source_directory))

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_groups = 0
    reports_written = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)

            file_start = datetime.now(UTC)
            file_result = _process_single_file(file_path, config, multipliers, error_log, progress)
            file_elapsed = (datetime.now(UTC) - file_start).total_seconds()

            if file_result.status == FileStatus.SUCCESS:
                success_count += 1
                total_rows += file_result.data_rows
                total_groups += file_result.summary_groups
                reports_written += len(file_result.reports)
            else:
                failed_count += 1

            progress.finish_file(
                success=(file_result.status == FileStatus.SUCCESS), rows=file_result.data_rows
            )

            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status=file_result.status.value,
                    data_rows=file_result.data_rows,
                    summary_groups=file_result.summary_groups,
                    reports_written=len(file_result.reports),
                    elapsed_seconds=file_elapsed,
                )
            )

    # Flush error log once per run
    try:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")
    except OSError as e:
        logger.warning(f"error log flush failed: {e}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=total_rows,
        total_groups=total_groups,
        reports_written=reports_written,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )


def _failed(file_path: Path, start_time: datetime, error: str, sheet: str | None = None) -> WorkbookFile:
    return WorkbookFile(
        path=file_path,
        name=file_path.name,
        sheet=sheet,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.FAILED,
        error=error,
    )


def _process_single_file(
    file_path: Path,
    config: ReportConfig,
    multipliers: MultiplierConfig,
    error_log: ErrorLogBuffer,
    progress: ProgressTracker | None = None,
) -> WorkbookFile:
    """Build every configured report for one workbook.

    Returns:
        WorkbookFile with SUCCESS and the written report paths, or FAILED with
        the error recorded in ``error_log``
    """
    start_time = datetime.now(UTC)

    try:
        sheet_name, session = load_session(file_path, config, multipliers)
    except (WorkbookReadError, SheetHeaderError) as e:
        error_log.append(
            ErrorRecord.create(
                file=file_path.name, sheet=config.sheet or "<FILE_LEVEL>", row=-1,
                error_type="READ_ERROR", message=str(e),
            )
        )
        logger.warning(f"{file_path.name}: {e}")
        return _failed(file_path, start_time, str(e), config.sheet)

    out_dir = Path(config.output_directory) / file_path.stem
    written: list[Path] = []
    summary_groups = 0

    for report in config.reports:
        variant = get_variant(report)
        try:
            rows = session.report(variant)
            target = out_dir / f"{variant.name}.xlsx"
            write_report(target, rows, variant, session.notes_for(variant))
        except (OSError, ValueError) as e:
            if progress is not None:
                progress.report_done(report, 0, success=False)
            error_log.append(
                ErrorRecord.create(
                    file=file_path.name, sheet=sheet_name, row=-1,
                    error_type="WRITE_ERROR", message=f"{report}: {e}",
                )
            )
            logger.warning(f"{file_path.name}: report {report} failed: {e}")
            return _failed(file_path, start_time, f"{report}: {e}", sheet_name)
        summary_groups += sum(1 for r in rows if r.row_id is None)
        written.append(target)
        if progress is not None:
            progress.report_done(report, len(rows))
        logger.debug(f"{file_path.name}: {report} -> {target} ({len(rows)} rows)")

    return WorkbookFile(
        path=file_path,
        name=file_path.name,
        sheet=sheet_name,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.SUCCESS,
        data_rows=len(session.rows),
        summary_groups=summary_groups,
        reports=written,
    )
