from __future__ import annotations

import pytest

from payroll_summary.models.config_models import BulkEdit, RowEdit, WorkbookEdits
from payroll_summary.services.session import ReportSession, load_dataset
from payroll_summary.services.variants import BY_DATE, DETAILED_BY_NAME


def _data_rows(report):
    return [r for r in report if r.row_id is not None]


@pytest.fixture()
def session(timesheet_rows) -> ReportSession:
    s = ReportSession()
    s.load(timesheet_rows)
    return s


def test_load_dataset_skips_header_and_keeps_sheet_index():
    rows = load_dataset([["header"], ["a"], ["b"]])
    assert [(r.row_id, r.cells) for r in rows] == [(1, ["a"]), (2, ["b"])]


def test_load_returns_data_row_count(timesheet_rows):
    s = ReportSession()
    assert s.load(timesheet_rows) == 5  # 空行も行番号を保持するため残す
    assert s.load([]) == 0


def test_by_date_report(session):
    report = session.report("by-date")
    assert [r.row_id for r in report] == [2, 4, 5, None, 1, None]
    summary = report[3].cells
    assert summary[1] == "2025.06.19"
    assert summary[3] == "PDA Pont teljes összege: 6"
    assert summary[4] == "Pont2 teljes összege: 34"
    assert summary[10] == "Fizetés teljes összege: 89"


def test_by_name_report_order(session):
    report = session.report("by-name")
    assert [r.row_id for r in report] == [1, 4, None, 2, None, 5, None]
    assert report[2].cells[10] == "Fizetés teljes összege: 87"


def test_override_follows_row_after_resort(session):
    # row 4 は by-date では 2番目、by-name でも同じ row_id で参照される
    session.set_row_multiplier("by-name", 4, 1)
    by_name = {r.row_id: r for r in _data_rows(session.report("by-name"))}
    assert by_name[4].cells[9:] == [1, 20]
    assert by_name[1].cells[9:] == [2.9, 29]


def test_override_is_scoped_to_multiplier_column(session):
    session.set_row_multiplier(BY_DATE, 1, 10)
    detailed = {r.row_id: r for r in _data_rows(session.report(DETAILED_BY_NAME))}
    assert detailed[1].cells[8] == 2.9


def test_global_multiplier_change_recomputes(session):
    session.set_multipliers(srbn=3)
    by_date = {r.row_id: r for r in _data_rows(session.report(BY_DATE))}
    assert by_date[1].cells[9:] == [3, 30]
    assert by_date[2].cells[9:] == [3.1, 31]


def test_reload_drops_overrides_and_selection(session, timesheet_rows):
    session.set_row_multiplier(BY_DATE, 1, 10)
    session.set_note(BY_DATE, 1, "szabadság")
    session.select_rows(BY_DATE, [2])
    session.load(timesheet_rows)
    assert session.multiplier_overrides == {}
    assert session.note_overrides == {}
    assert session.selection == set()


def test_clear_restores_session_defaults():
    s = ReportSession(srbn_multiplier=2.5, hfex_multiplier=3.5)
    s.set_multipliers(srbn=9, hfex=9)
    s.clear()
    assert (s.srbn_multiplier, s.hfex_multiplier) == (2.5, 3.5)
    assert s.rows == []
    assert s.report(BY_DATE) == []


def test_notes(session):
    session.set_note(BY_DATE, 2, "túlóra")
    assert session.notes_for(BY_DATE) == {2: "túlóra"}
    assert session.notes_for(DETAILED_BY_NAME) == {}


def test_select_all_excludes_summary_rows(session):
    selected = session.select_all(BY_DATE)
    assert selected == {(1, 9), (2, 9), (4, 9), (5, 9)}


def test_apply_bulk_multiplier(session):
    session.select_rows(BY_DATE, [1, 5])
    assert session.apply_bulk_multiplier(4) == 2
    assert session.selection == set()
    by_date = {r.row_id: r for r in _data_rows(session.report(BY_DATE))}
    assert by_date[5].cells[9:] == [4, 16]
    assert by_date[1].cells[9:] == [4, 40]


def test_apply_bulk_multiplier_noop(session):
    assert session.apply_bulk_multiplier(4) == 0
    session.select_rows(BY_DATE, [1])
    assert session.apply_bulk_multiplier(0) == 0
    assert session.apply_bulk_multiplier(None) == 0
    assert session.multiplier_overrides == {}
    assert session.selection == {(1, 9)}


def test_reports_all_variants(session):
    reports = session.reports()
    assert set(reports) == {"by-date", "detailed-by-date", "by-name", "detailed-by-name"}
    assert session.reports(["by-name"]).keys() == {"by-name"}


def test_report_is_idempotent(session):
    session.set_row_multiplier(BY_DATE, 2, 2)
    assert session.report(BY_DATE) == session.report(BY_DATE)


def test_apply_edits_uses_worksheet_row_numbers(session):
    edits = WorkbookEdits(
        rows=(
            RowEdit(row=6, report="by-date", multiplier=1.5, note="pótlás"),
            RowEdit(row=99, report="by-date", multiplier=9),
        ),
    )
    assert session.apply_edits(edits) == 1
    assert session.multiplier_overrides == {(5, 9): 1.5}
    assert session.notes_for(BY_DATE) == {5: "pótlás"}
    by_date = {r.row_id: r for r in _data_rows(session.report(BY_DATE))}
    assert by_date[5].cells[9:] == [1.5, 6]


def test_apply_edits_bulk_then_rows(session):
    edits = WorkbookEdits(
        rows=(RowEdit(row=2, report="by-date", multiplier=1),),
        bulk=(BulkEdit(report="by-date", multiplier=2.0),),
    )
    # 4 data rows from the bulk entry + 1 row entry
    assert session.apply_edits(edits) == 5
    by_date = {r.row_id: r for r in _data_rows(session.report(BY_DATE))}
    assert by_date[1].cells[9:] == [1, 10]
    assert by_date[4].cells[9:] == [2.0, 40]
    assert by_date[5].cells[9:] == [2.0, 8]
    assert session.selection == set()


def test_apply_edits_bulk_row_subset_skips_unknown_rows(session):
    edits = WorkbookEdits(bulk=(BulkEdit(report="by-name", multiplier=5, rows=(2, 3, 50)),))
    assert session.apply_edits(edits) == 2
    assert session.multiplier_overrides == {(1, 9): 5, (2, 9): 5}


def test_apply_edits_note_only_keeps_multipliers(session):
    edits = WorkbookEdits(rows=(RowEdit(row=5, report="detailed-by-name", note="beteg"),))
    assert session.apply_edits(edits) == 1
    assert session.multiplier_overrides == {}
    assert session.notes_for(DETAILED_BY_NAME) == {4: "beteg"}
    assert session.notes_for(BY_DATE) == {}
