from __future__ import annotations

import json

from payroll_summary.models.error_record import ErrorRecord


def test_create_sets_utc_timestamp():
    rec = ErrorRecord.create("week25.xlsx", "Munka1", -1, "READ_ERROR", "sheet 'X' not found")
    assert rec.timestamp.endswith("Z")
    assert rec.row == -1


def test_json_line_keeps_non_ascii():
    rec = ErrorRecord("2025-06-19T08:00:00Z", "hét.xlsx", "Munka1", 3, "WRITE_ERROR", "hibás érték")
    line = rec.to_json_line()
    assert "hibás érték" in line
    assert json.loads(line) == {
        "timestamp": "2025-06-19T08:00:00Z",
        "file": "hét.xlsx",
        "sheet": "Munka1",
        "row": 3,
        "error_type": "WRITE_ERROR",
        "message": "hibás érték",
    }
