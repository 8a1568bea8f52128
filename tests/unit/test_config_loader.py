from __future__ import annotations

from pathlib import Path

import pytest

from payroll_summary.config.loader import ConfigError, load_config
from payroll_summary.models.config_models import ALL_REPORTS, BulkEdit, RowEdit


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert cfg.output_directory == "./out"
    assert cfg.sheet is None
    assert cfg.multipliers.srbn == 2.9
    assert cfg.multipliers.hfex == 3.1
    assert cfg.reports == ALL_REPORTS


def test_defaults_applied(temp_workdir: Path):
    p = temp_workdir / "config" / "min.yml"
    p.write_text("source_directory: ./data\noutput_directory: ./out\n", encoding="utf-8")
    cfg = load_config(p)
    assert (cfg.multipliers.srbn, cfg.multipliers.hfex) == (2.9, 3.1)
    assert cfg.reports == ALL_REPORTS


def test_sheet_and_report_subset(temp_workdir: Path):
    p = temp_workdir / "config" / "sub.yml"
    p.write_text(
        "source_directory: ./data\noutput_directory: ./out\nsheet: Munka1\n"
        "multipliers: {srbn: 3}\nreports: [by-name]\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.sheet == "Munka1"
    assert cfg.multipliers.srbn == 3.0
    assert cfg.multipliers.hfex == 3.1
    assert cfg.reports == ("by-name",)


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "bad.yml"
    p.write_text("source_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


@pytest.mark.parametrize(
    "body",
    [
        "output_directory: ./out\n",  # source_directory 欠落
        "source_directory: ./data\noutput_directory: ./out\nreports: [by-month]\n",
        "source_directory: ./data\noutput_directory: ./out\nmultipliers: {srbn: -1}\n",
        "source_directory: ./data\noutput_directory: ./out\nunknown_key: 1\n",
    ],
)
def test_schema_violations(temp_workdir: Path, body: str):
    p = temp_workdir / "config" / "invalid.yml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)


def _with_overrides(temp_workdir: Path, overrides: str) -> Path:
    (temp_workdir / "config" / "overrides.yml").write_text(overrides, encoding="utf-8")
    p = temp_workdir / "config" / "edits.yml"
    p.write_text(
        "source_directory: ./data\noutput_directory: ./out\noverrides_file: config/overrides.yml\n",
        encoding="utf-8",
    )
    return p


def test_overrides_file_loaded(temp_workdir: Path):
    p = _with_overrides(
        temp_workdir,
        "week25.xlsx:\n"
        "  rows:\n"
        "    - {row: 6, report: by-date, multiplier: 1.5, note: pótlás}\n"
        "    - {row: 3, report: detailed-by-name, note: beteg}\n"
        "  bulk:\n"
        "    - {report: by-name, multiplier: 2}\n"
        "    - {report: by-date, rows: [2, 4], multiplier: 3}\n"
        "week26.xlsx:\n",
    )
    cfg = load_config(p)
    assert set(cfg.edits) == {"week25.xlsx", "week26.xlsx"}
    week25 = cfg.edits["week25.xlsx"]
    assert week25.rows == (
        RowEdit(row=6, report="by-date", multiplier=1.5, note="pótlás"),
        RowEdit(row=3, report="detailed-by-name", multiplier=None, note="beteg"),
    )
    assert week25.bulk == (
        BulkEdit(report="by-name", multiplier=2.0, rows=None),
        BulkEdit(report="by-date", multiplier=3.0, rows=(2, 4)),
    )
    assert cfg.edits["week26.xlsx"].rows == ()


def test_no_overrides_file(write_config: Path):
    assert load_config(write_config).edits == {}


def test_overrides_file_missing(temp_workdir: Path):
    p = temp_workdir / "config" / "edits.yml"
    p.write_text(
        "source_directory: ./data\noutput_directory: ./out\noverrides_file: config/nope.yml\n",
        encoding="utf-8",
    )
    with pytest.raises(ConfigError, match="overrides file not found"):
        load_config(p)


@pytest.mark.parametrize(
    "body",
    [
        "- week25.xlsx\n",  # マッピングではない
        "week25.xlsx:\n  rows:\n    - {row: 1, report: by-date, multiplier: 2}\n",  # ヘッダー行
        "week25.xlsx:\n  rows:\n    - {row: 2, report: by-date}\n",
        "week25.xlsx:\n  rows:\n    - {row: 2, report: by-month, multiplier: 2}\n",
        "week25.xlsx:\n  bulk:\n    - {report: by-date, multiplier: 0}\n",
        "week25.xlsx:\n  bulk:\n    - {report: by-date, multiplier: 2, rows: []}\n",
        "week25.xlsx:\n  sheet: Munka1\n",
    ],
)
def test_overrides_schema_violations(temp_workdir: Path, body: str):
    p = _with_overrides(temp_workdir, body)
    with pytest.raises(ConfigError, match="overrides validation failed"):
        load_config(p)
