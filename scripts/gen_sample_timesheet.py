#!/usr/bin/env python3
"""Synthetic timesheet workbook generator.

Writes one worksheet in the canonical 16-column layout read by payroll_summary:
- Row 1: header row
- Row 2+: data rows (primary columns 0-8, secondary columns 9-15)

Worker names carry the SRBN / HF-EX markers in roughly equal shares (plus some
workers without a marker) so every multiplier rule is exercised. Useful for manual
runs and performance checks.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

HEADER = [
    "Szedőkód", "Szedő neve", "Dátum", "PDA Pont", "Pont 2",
    "Műszak kezdete", "Műszak vége", "Összesített óra", "Megjegyzés",
    "Szedőkód", "Szedő neve", "Dátum", "Túlóra", "Elszámolandó pont",
    "Műszak kezdet", "Műszak vége",
]

SURNAMES = ["Kovács", "Nagy", "Szabó", "Tóth", "Horváth", "Varga", "Kiss", "Molnár", "Németh", "Farkas"]
MARKERS = ["SRBN", "HF-EX", ""]

# 2025-01-01 = 45660 (see services.normalize.serial_date_to_datetime)
BASE_SERIAL = 45660


def generate_rows(rows: int, workers: int, days: int, seed: int = 42) -> list[list[Any]]:
    """Header + ``rows`` synthetic data rows."""
    rng = np.random.default_rng(seed)

    names = []
    for i in range(workers):
        marker = MARKERS[i % len(MARKERS)]
        surname = SURNAMES[i % len(SURNAMES)]
        names.append(f"{surname} {i + 1:03d} {marker}".strip())

    worker_idx = rng.integers(0, workers, rows)
    day_idx = rng.integers(0, days, rows)
    pda = np.round(rng.uniform(0, 40, rows), 2)
    pont2 = np.round(rng.uniform(0, 60, rows), 2)
    overtime = rng.integers(0, 4, rows)
    start = rng.uniform(0.25, 0.4, rows)  # 06:00 .. 09:36
    hours = np.round(rng.uniform(4, 10, rows), 2)

    out: list[list[Any]] = [list(HEADER)]
    for i in range(rows):
        date = (pd.Timestamp("2025-01-01") + pd.Timedelta(days=int(day_idx[i]))).strftime("%Y.%m.%d")
        code = f"SZ{int(worker_idx[i]) + 1:03d}"
        name = names[worker_idx[i]]
        shift_start = BASE_SERIAL + int(day_idx[i]) + float(start[i])
        shift_end = shift_start + float(hours[i]) / 24
        primary = [code, name, date, float(pda[i]), float(pont2[i]),
                   shift_start, shift_end, float(hours[i]), None]
        secondary = [code, name, date, int(overtime[i]), float(pont2[i]), shift_start, shift_end]
        out.append(primary + secondary)
    return out


def create_workbook(output_path: Path, rows: int, workers: int, days: int, sheet: str, seed: int) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = generate_rows(rows, workers, days, seed)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(data).to_excel(writer, sheet_name=sheet, header=False, index=False)

    print(f"Created timesheet workbook: {output_path}")
    print(f"  Sheet: {sheet}")
    print(f"  Data rows: {rows:,} (+ 1 header row)")
    print(f"  Workers: {workers}  Days: {days}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic timesheet workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 500 rows, 12 workers over one week
  %(prog)s data/sample.xlsx

  # Larger dataset for timing a full run
  %(prog)s data/large.xlsx --rows 20000 --workers 120 --days 31
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--rows", type=int, default=500, help="Number of data rows (default: 500)")
    parser.add_argument("--workers", type=int, default=12, help="Number of distinct workers (default: 12)")
    parser.add_argument("--days", type=int, default=7, help="Number of distinct dates (default: 7)")
    parser.add_argument("--sheet", default="Munka1", help="Worksheet name (default: Munka1)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--dry-run", action="store_true", help="Show the plan without writing the file")
    args = parser.parse_args()

    for flag in ("rows", "workers", "days"):
        if getattr(args, flag) <= 0:
            print(f"Error: --{flag} must be positive", file=sys.stderr)
            return 1

    print("Timesheet generation plan:")
    print(f"  Output file: {args.output}")
    print(f"  Rows: {args.rows:,}  Workers: {args.workers}  Days: {args.days}")
    print(f"  Random seed: {args.seed}")

    if args.dry_run:
        print("\n[DRY RUN] Would generate the workbook but not creating it.")
        return 0

    try:
        create_workbook(args.output, args.rows, args.workers, args.days, args.sheet, args.seed)
    except OSError as e:
        print(f"\nError generating workbook: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
