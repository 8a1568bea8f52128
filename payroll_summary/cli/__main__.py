from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from payroll_summary.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from payroll_summary.logging.init import log_summary, setup_logging
from payroll_summary.models.config_models import MultiplierConfig, ReportConfig
from payroll_summary.services.orchestrator import (
    ProcessingError,
    preview_file,
    process_all,
    scan_excel_files,
)
from payroll_summary.services.summary import render_summary_line
from payroll_summary.services.variants import VARIANTS

"""CLI entrypoint: python -m payroll_summary.cli

Flow:
- load .env (multiplier env vars) and config/report.yml
- resolve effective multipliers: CLI flag > environment > config
- --inspect-data: print sheet headers & first rows, then exit
- --preview VARIANT: print the display-formatted report for each workbook
- otherwise build & write the configured reports and print the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

ENV_SRBN = "PAYROLL_SRBN_MULTIPLIER"
ENV_HFEX = "PAYROLL_HFEX_MULTIPLIER"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; failures only warn."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Timesheet payroll summary reports")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Config YAML path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    p.add_argument("--preview", choices=sorted(VARIANTS), help="Print one report per workbook instead of writing files")
    p.add_argument("--srbn", type=float, default=None, help="SRBN multiplier (overrides env/config)")
    p.add_argument("--hfex", type=float, default=None, help="HF-EX multiplier (overrides env/config)")
    return p.parse_args(argv)


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw.replace(",", "."))
    except ValueError as e:
        raise ConfigError(f"{name} is not a number: {raw!r}") from e


def resolve_multipliers(cfg: ReportConfig, args: argparse.Namespace) -> MultiplierConfig:
    """CLI flag > environment (.env) > config file."""
    srbn = args.srbn if args.srbn is not None else _env_float(ENV_SRBN)
    hfex = args.hfex if args.hfex is not None else _env_float(ENV_HFEX)
    return MultiplierConfig(
        srbn=srbn if srbn is not None else cfg.multipliers.srbn,
        hfex=hfex if hfex is not None else cfg.multipliers.hfex,
    )


def _inspect_data(cfg: ReportConfig) -> int:
    from payroll_summary.excel.reader import WorkbookReadError, read_workbook

    directory = Path(cfg.source_directory)
    try:
        excel_files = scan_excel_files(directory)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not excel_files:
        print("inspect: no .xlsx / .xls files")
        return EXIT_SUCCESS_ALL
    for f in excel_files:
        print(f"FILE: {f.name}")
        try:
            sheets = read_workbook(f)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        for sname, rows in sheets.items():
            header = rows[0] if rows else []
            print(f"  SHEET: {sname} rows={max(len(rows) - 1, 0)} header={header}")
            print("    sample_rows=", rows[1:4])
    return EXIT_SUCCESS_ALL


def _preview(cfg: ReportConfig, multipliers: MultiplierConfig, report: str, logger) -> int:
    try:
        files = scan_excel_files(Path(cfg.source_directory))
    except ProcessingError as e:
        logger.error(f"preview: {e}")
        return EXIT_FATAL
    code = EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name} REPORT: {report}")
        try:
            print(preview_file(f, cfg, multipliers, report))
        except Exception as e:  # 1ファイルの失敗で全体を止めない
            logger.error(f"preview {f.name}: {e}")
            code = EXIT_PARTIAL_FAILURE
    return code


def main(argv: list[str] | None = None) -> int:
    # NOTE: [] が渡された場合に sys.argv[1:] が混入しないよう None のときのみ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
        multipliers = resolve_multipliers(cfg, args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"multipliers srbn={multipliers.srbn} hfex={multipliers.hfex}")

    if args.preview:
        return _preview(cfg, multipliers, args.preview, logger)

    logger.info(f"Processing files from: {directory}")
    try:
        result = process_all(cfg, multipliers)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
