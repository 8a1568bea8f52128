# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from payroll_summary.logging.init import setup_logging

PRIMARY_HEADER = [
    "Szedőkód", "Szedő neve", "Dátum", "PDA Pont", "Pont 2",
    "Műszak kezdete", "Műszak vége", "Összesített óra", "Megjegyzés",
]
SECONDARY_HEADER = [
    "Szedőkód", "Szedő neve", "Dátum", "Túlóra", "Elszámolandó pont",
    "Műszak kezdet", "Műszak vége",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # .env 読込や前テストの値が混入しないように
    monkeypatch.delenv("PAYROLL_SRBN_MULTIPLIER", raising=False)
    monkeypatch.delenv("PAYROLL_HFEX_MULTIPLIER", raising=False)
    # --debug を使ったテストのレベルを持ち越さない
    setup_logging()
    yield


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./out
multipliers:
  srbn: 2.9
  hfex: 3.1
reports: [by-date, detailed-by-date, by-name, detailed-by-name]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "report.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def timesheet_rows() -> list[list[object]]:
    """Canonical 16-column worksheet: header + 4 data rows + 1 blank row."""
    header = PRIMARY_HEADER + SECONDARY_HEADER
    return [
        header,
        ["SZ01", "Kovács SRBN", "2025.06.20", 5, 10, None, None, 8, None,
         "SZ01", "Kovács SRBN", "2025.06.20", 1, 10, None, None],
        ["SZ02", "Nagy HF-EX", "2025.06.19", 3, 10, None, None, 8, None,
         "SZ02", "Nagy HF-EX", "2025.06.19", 0, 10, None, None],
        [None] * 16,
        ["SZ01", "Kovács SRBN", "2025.06.19", 2, 20, None, None, 6, "késés",
         "SZ01", "Kovács SRBN", "2025.06.19", 0, 20, None, None],
        ["SZ03", "Szabó", "2025.06.19", 1, 4, None, None, 4, None,
         "SZ03", "Szabó", "2025.06.19", 2, 4, None, None],
    ]


def make_workbook(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write raw rows (no pandas header) into an .xlsx file."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def timesheet_workbook(temp_workdir: Path, timesheet_rows) -> Path:
    return make_workbook(temp_workdir / "data" / "week25.xlsx", {"Munka1": timesheet_rows})
