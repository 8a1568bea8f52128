from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest
import yaml

from payroll_summary.config.loader import OVERRIDES_SCHEMA_PATH, SCHEMA_PATH

"""config_schema.json / overrides_schema.json contract: the shipped examples must validate."""

EXAMPLE_CONFIG = Path(__file__).resolve().parents[2] / "config" / "report.example.yml"
EXAMPLE_OVERRIDES = EXAMPLE_CONFIG.with_name("overrides.example.yml")


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_is_valid_draft7():
    jsonschema.Draft7Validator.check_schema(_schema())


def test_example_config_validates():
    data = yaml.safe_load(EXAMPLE_CONFIG.read_text(encoding="utf-8"))
    jsonschema.validate(data, _schema())


@pytest.mark.parametrize(
    "data",
    [
        {"source_directory": "./data"},
        {"source_directory": "", "output_directory": "./out"},
        {"source_directory": "./data", "output_directory": "./out", "reports": []},
        {"source_directory": "./data", "output_directory": "./out", "reports": ["by-date", "by-date"]},
        {"source_directory": "./data", "output_directory": "./out", "multipliers": {"other": 1}},
        {"source_directory": "./data", "output_directory": "./out", "sheet": 3},
    ],
)
def test_schema_rejects(data):
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(data, _schema())


def test_overrides_schema_is_valid_draft7():
    jsonschema.Draft7Validator.check_schema(
        json.loads(OVERRIDES_SCHEMA_PATH.read_text(encoding="utf-8"))
    )


def test_example_overrides_validate():
    data = yaml.safe_load(EXAMPLE_OVERRIDES.read_text(encoding="utf-8"))
    jsonschema.validate(data, json.loads(OVERRIDES_SCHEMA_PATH.read_text(encoding="utf-8")))
