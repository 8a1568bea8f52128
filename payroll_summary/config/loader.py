from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    ALL_REPORTS,
    DEFAULT_HFEX_MULTIPLIER,
    DEFAULT_SRBN_MULTIPLIER,
    BulkEdit,
    MultiplierConfig,
    ReportConfig,
    RowEdit,
    WorkbookEdits,
)

"""Config loader.

Responsibilities:
- Load YAML config (default: config/report.yml)
- Validate against config_schema.json (shipped next to this module)
- Apply defaults (first sheet, 2.9 / 3.1 multipliers, all four reports)
- Load the optional overrides file (per-workbook row multipliers, notes and bulk
  multipliers), validated against overrides_schema.json
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
OVERRIDES_SCHEMA_PATH = Path(__file__).with_name("overrides_schema.json")
DEFAULT_CONFIG_PATH = Path("config/report.yml")


class ConfigError(Exception):
    pass


def _validate_schema(data: Any, schema_path: Path, label: str) -> None:
    """Validate data against a JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or the data violates it
    """
    if not schema_path.exists():
        raise ConfigError(f"{label} schema not found: {schema_path}")

    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"{label} validation failed: {e.message}") from e


def _read_yaml(path: Path, label: str) -> Any:
    if not path.exists():
        raise ConfigError(f"{label} file not found: {path}")
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e


def load_edits(path: Path) -> dict[str, WorkbookEdits]:
    """Load the overrides file: workbook file name -> WorkbookEdits.

    Row numbers are worksheet row numbers as Excel shows them (the header is row 1).
    """
    data = _read_yaml(path, "overrides")
    _validate_schema(data, OVERRIDES_SCHEMA_PATH, "overrides")

    edits: dict[str, WorkbookEdits] = {}
    for workbook, raw in data.items():
        raw = raw or {}
        edits[workbook] = WorkbookEdits(
            rows=tuple(
                RowEdit(
                    row=e["row"],
                    report=e["report"],
                    multiplier=float(e["multiplier"]) if "multiplier" in e else None,
                    note=e.get("note"),
                )
                for e in raw.get("rows") or []
            ),
            bulk=tuple(
                BulkEdit(
                    report=e["report"],
                    multiplier=float(e["multiplier"]),
                    rows=tuple(e["rows"]) if "rows" in e else None,
                )
                for e in raw.get("bulk") or []
            ),
        )
    return edits


def load_config(path: Path) -> ReportConfig:
    data = _read_yaml(path, "config")

    _validate_schema(data, SCHEMA_PATH, "config")

    mult_raw = data.get("multipliers") or {}
    multipliers = MultiplierConfig(
        srbn=float(mult_raw.get("srbn", DEFAULT_SRBN_MULTIPLIER)),
        hfex=float(mult_raw.get("hfex", DEFAULT_HFEX_MULTIPLIER)),
    )
    overrides_file = data.get("overrides_file")
    return ReportConfig(
        source_directory=data["source_directory"],
        output_directory=data["output_directory"],
        sheet=data.get("sheet"),
        multipliers=multipliers,
        reports=tuple(data.get("reports") or ALL_REPORTS),
        edits=load_edits(Path(overrides_file)) if overrides_file else {},
    )
