"""Attendance report rows and file writers."""

import json
from collections.abc import Iterator
from datetime import date
from pathlib import Path
from typing import Literal

import structlog
from openpyxl import Workbook

from rollcall.models import AttendanceStatus, Classification

logger = structlog.get_logger(__name__)

SHEET_TITLE = "Attendance Report"

HEADERS = {
    "en": ("Name", "Status", "Name in meeting"),
    "ar": ("الاسم", "الحالة", "الاسم الأصلي في زووم"),
}

STATUS_LABELS = {
    "en": {
        AttendanceStatus.PRESENT: "Present",
        AttendanceStatus.ABSENT: "Absent",
        AttendanceStatus.UNEXPECTED: "Not on roster",
    },
    "ar": {
        AttendanceStatus.PRESENT: "حاضر",
        AttendanceStatus.ABSENT: "غائب",
        AttendanceStatus.UNEXPECTED: "خارج الكشف",
    },
}

Language = Literal["en", "ar"]


def status_label(status: AttendanceStatus, language: Language = "en") -> str:
    return STATUS_LABELS[language][status]


def report_rows(
    classification: Classification,
    language: Language = "en",
    include_header: bool = True,
) -> Iterator[tuple[str, str, str]]:
    """Yield ``(name, status label, original name or "")`` rows.

    Buckets are emitted present, absent, unexpected, each in its stored order.
    """
    if include_header:
        yield HEADERS[language]
    for status in AttendanceStatus:
        label = status_label(status, language)
        for attendee in classification.bucket(status):
            yield attendee.name, label, attendee.original_name or ""


def default_report_name(today: date | None = None) -> str:
    today = today or date.today()
    return f"attendance_report_{today.isoformat()}.xlsx"


def write_xlsx(classification: Classification, path: str | Path, language: Language = "en") -> Path:
    """Write the report as a single-sheet workbook."""
    path = Path(path)
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE
    if language == "ar":
        worksheet.sheet_view.rightToLeft = True

    for row in report_rows(classification, language):
        worksheet.append(list(row))

    workbook.save(path)
    logger.info("report_written", path=str(path), rows=classification.total, format="xlsx")
    return path


def write_json(classification: Classification, path: str | Path) -> Path:
    """Dump the classification (with ``originalName`` keys) as JSON."""
    path = Path(path)
    payload = {
        status.value: [
            {"name": a.name, "status": a.status.value, "originalName": a.original_name}
            for a in classification.bucket(status)
        ]
        for status in AttendanceStatus
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info("report_written", path=str(path), rows=classification.total, format="json")
    return path
