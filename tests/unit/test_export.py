"""Unit tests for report export."""

import json
from datetime import date

from openpyxl import load_workbook

from rollcall.export import default_report_name, report_rows, status_label, write_json, write_xlsx
from rollcall.models import AttendanceStatus
from rollcall.processing.reconciliation import enforce_disjoint


class TestReportRows:
    """Tests for row generation."""

    def test_rows_in_bucket_order(self, raw_classification):
        rows = list(report_rows(enforce_disjoint(raw_classification)))

        assert rows[0] == ("Name", "Status", "Name in meeting")
        assert rows[1:] == [
            ("Amal Nasser", "Present", "Amal-zoom"),
            ("Bilal Saeed", "Present", "Bilal S"),
            ("Chadi Fares", "Absent", ""),
            ("Dina Guest", "Not on roster", ""),
        ]

    def test_arabic_labels(self, raw_classification):
        rows = list(report_rows(raw_classification, language="ar", include_header=False))
        assert rows[0][1] == "حاضر"
        assert status_label(AttendanceStatus.ABSENT, "ar") == "غائب"

    def test_default_name(self):
        assert default_report_name(date(2024, 5, 1)) == "attendance_report_2024-05-01.xlsx"


class TestWriters:
    """Tests for file output."""

    def test_write_xlsx(self, tmp_path, raw_classification):
        path = write_xlsx(enforce_disjoint(raw_classification), tmp_path / "report.xlsx")

        worksheet = load_workbook(path).active
        values = [tuple(cell or "" for cell in row) for row in worksheet.iter_rows(values_only=True)]

        assert worksheet.title == "Attendance Report"
        assert len(values) == 5
        assert values[3] == ("Chadi Fares", "Absent", "")

    def test_write_xlsx_right_to_left(self, tmp_path, raw_classification):
        path = write_xlsx(raw_classification, tmp_path / "report_ar.xlsx", language="ar")
        assert load_workbook(path).active.sheet_view.rightToLeft

    def test_write_json(self, tmp_path, raw_classification):
        path = write_json(enforce_disjoint(raw_classification), tmp_path / "report.json")
        payload = json.loads(path.read_text(encoding="utf-8"))

        assert list(payload) == ["present", "absent", "unexpected"]
        assert payload["present"][0] == {"name": "Amal Nasser", "status": "present", "originalName": "Amal-zoom"}
        assert payload["absent"][0]["originalName"] is None
