"""Pytest configuration and fixtures."""

import json
from io import BytesIO

import pytest
from openpyxl import Workbook

from rollcall.models import (
    AttendanceStatus,
    Attendee,
    Classification,
    ImagePayload,
    RosterSource,
    RosterSourceKind,
)
from rollcall.oracle import OracleAdapter


class FakeOracle:
    """Scripted NameOracle: canned extraction text per image label."""

    def __init__(self, extractions=None, match_response="", failing=()):
        self.extractions = extractions or {}
        self.match_response = match_response
        self.failing = set(failing)
        self.extract_calls = []
        self.match_requests = []

    def extract_names(self, image, mode):
        self.extract_calls.append((image.label, mode))
        if image.label in self.failing:
            raise RuntimeError(f"cannot read {image.label}")
        return self.extractions.get(image.label, "")

    def match_names(self, request):
        self.match_requests.append(request)
        if callable(self.match_response):
            return self.match_response(request)
        return self.match_response


def make_image(label: str) -> ImagePayload:
    return ImagePayload(data=label.encode("utf-8"), mime_type="image/png", label=label)


def make_workbook_bytes(rows: list[list]) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    for row in rows:
        worksheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def fake_oracle_cls():
    return FakeOracle


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def workbook_factory():
    return make_workbook_bytes


@pytest.fixture
def roster_rows() -> list[list]:
    """A messy roster sheet: headers, serial numbers, dates, names."""
    from datetime import datetime

    return [
        ["No.", "Name", "Department", "Date"],
        [1, "Ahmed Hassan", "Sales", datetime(2024, 5, 1)],
        [2, "Sara Mahmoud", "Finance", datetime(2024, 5, 1)],
        [3, "  Omar   Khaled ", "IT", None],
        [4, "Ahmed Hassan", "Sales", None],
        [5, "12345678", "HR", "Ali"],
    ]


@pytest.fixture
def roster_source(workbook_factory, roster_rows) -> RosterSource:
    return RosterSource(
        kind=RosterSourceKind.SPREADSHEET,
        data=workbook_factory(roster_rows),
        label="roster.xlsx",
    )


@pytest.fixture
def matching_payload() -> dict:
    """Oracle answer for the roster fixture against two screenshots."""
    return {
        "present": [
            {"name": "Ahmed Hassan", "originalName": "Ahmed H."},
            {"name": "Sara Mahmoud", "originalName": "سارة محمود"},
        ],
        "absent": ["Omar Khaled"],
        "unexpected": ["Guest Laptop"],
    }


@pytest.fixture
def screenshot_oracle(matching_payload) -> FakeOracle:
    return FakeOracle(
        extractions={
            "shot1.png": "Ahmed H. (Host)\nسارة محمود\n",
            "shot2.png": "- Ahmed H.\n- Guest Laptop\nOK\n",
        },
        match_response=json.dumps(matching_payload, ensure_ascii=False),
    )


@pytest.fixture
def screenshots() -> list[ImagePayload]:
    return [make_image("shot1.png"), make_image("shot2.png")]


@pytest.fixture
def adapter(screenshot_oracle) -> OracleAdapter:
    return OracleAdapter(screenshot_oracle)


@pytest.fixture
def raw_classification() -> Classification:
    """Unsorted raw classification: roster {A, B, C}, observations {A, B, D}."""
    return Classification(
        present=[
            Attendee(name="Bilal Saeed", status=AttendanceStatus.PRESENT, original_name="Bilal S"),
            Attendee(name="Amal Nasser", status=AttendanceStatus.PRESENT, original_name="Amal-zoom"),
        ],
        absent=[Attendee(name="Chadi Fares", status=AttendanceStatus.ABSENT)],
        unexpected=[Attendee(name="Dina Guest", status=AttendanceStatus.UNEXPECTED)],
    )
