"""Unit tests for Pydantic models."""

import base64

import pytest
from pydantic import ValidationError

from rollcall.models import (
    AttendanceStatus,
    Attendee,
    Classification,
    ImagePayload,
    MatchedPair,
    MatchingResponse,
    MatchSensitivity,
    RosterSource,
    RosterSourceKind,
    WorkflowPhase,
)


class TestAttendee:
    """Tests for Attendee model."""

    def test_valid_attendee(self):
        attendee = Attendee(name="Ahmed Hassan", status=AttendanceStatus.PRESENT, original_name="Ahmed H.")
        assert attendee.status == AttendanceStatus.PRESENT
        assert attendee.original_name == "Ahmed H."

    def test_original_name_optional(self):
        attendee = Attendee(name="Omar Khaled", status=AttendanceStatus.ABSENT)
        assert attendee.original_name is None

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Attendee(name="", status=AttendanceStatus.ABSENT)

    def test_matches_name_case_insensitive(self):
        attendee = Attendee(name="Ahmed Hassan", status=AttendanceStatus.PRESENT)
        assert attendee.matches("hASSan")
        assert not attendee.matches("omar")

    def test_matches_original_name(self):
        attendee = Attendee(name="Sara Mahmoud", status=AttendanceStatus.PRESENT, original_name="سارة محمود")
        assert attendee.matches("سارة")


class TestClassification:
    """Tests for Classification model."""

    @pytest.fixture
    def classification(self) -> Classification:
        return Classification(
            present=[Attendee(name="Ahmed Hassan", status=AttendanceStatus.PRESENT)],
            absent=[
                Attendee(name="Omar Khaled", status=AttendanceStatus.ABSENT),
                Attendee(name="Sara Mahmoud", status=AttendanceStatus.ABSENT),
            ],
        )

    def test_bucket_lookup(self, classification):
        assert classification.bucket(AttendanceStatus.ABSENT) is classification.absent
        assert classification.bucket(AttendanceStatus.UNEXPECTED) == []

    def test_counts_and_total(self, classification):
        assert classification.counts() == {
            AttendanceStatus.PRESENT: 1,
            AttendanceStatus.ABSENT: 2,
            AttendanceStatus.UNEXPECTED: 0,
        }
        assert classification.total == 3

    def test_names(self, classification):
        assert classification.names(AttendanceStatus.ABSENT) == ["Omar Khaled", "Sara Mahmoud"]
        assert len(classification.names()) == 3


class TestImagePayload:
    """Tests for ImagePayload model."""

    def test_from_data_url(self):
        encoded = base64.b64encode(b"\x89PNG").decode("ascii")
        image = ImagePayload.from_data_url(f"data:image/jpeg;base64,{encoded}", label="shot.jpg")
        assert image.data == b"\x89PNG"
        assert image.mime_type == "image/jpeg"
        assert image.label == "shot.jpg"

    def test_from_bare_base64(self):
        encoded = base64.b64encode(b"raw").decode("ascii")
        image = ImagePayload.from_data_url(encoded)
        assert image.data == b"raw"
        assert image.mime_type == "image/png"

    def test_invalid_base64(self):
        with pytest.raises(ValueError):
            ImagePayload.from_data_url("data:image/png;base64,not base64!!")

    def test_to_base64_round_trip(self):
        image = ImagePayload(data=b"abc")
        assert base64.b64decode(image.to_base64()) == b"abc"

    def test_from_path(self, tmp_path):
        path = tmp_path / "gallery.jpg"
        path.write_bytes(b"jpeg-bytes")
        image = ImagePayload.from_path(path)
        assert image.mime_type == "image/jpeg"
        assert image.label == "gallery.jpg"


class TestRosterSource:
    """Tests for RosterSource model."""

    def test_spreadsheet_suffix(self, tmp_path):
        path = tmp_path / "Roster.XLSX"
        path.write_bytes(b"xlsx")
        assert RosterSource.from_path(path).kind == RosterSourceKind.SPREADSHEET

    def test_image_suffix(self, tmp_path):
        path = tmp_path / "list.png"
        path.write_bytes(b"png")
        source = RosterSource.from_path(path)
        assert source.kind == RosterSourceKind.IMAGE
        assert source.as_image().mime_type == "image/png"

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "roster.pdf"
        path.write_bytes(b"pdf")
        with pytest.raises(ValueError):
            RosterSource.from_path(path)


class TestMatchingModels:
    """Tests for matching wire models."""

    def test_matched_pair_alias(self):
        pair = MatchedPair.model_validate({"name": "Ahmed Hassan", "originalName": "Ahmed H."})
        assert pair.original_name == "Ahmed H."

    def test_response_requires_all_buckets(self):
        with pytest.raises(ValidationError):
            MatchingResponse.model_validate({"present": [], "absent": []})

    def test_response_ignores_extra_fields(self):
        response = MatchingResponse.model_validate(
            {"present": [], "absent": ["Omar Khaled"], "unexpected": [], "notes": "x"}
        )
        assert response.absent == ["Omar Khaled"]


class TestEnums:
    """Tests for enum values."""

    def test_attendance_status(self):
        assert AttendanceStatus.PRESENT.value == "present"
        assert AttendanceStatus.UNEXPECTED.value == "unexpected"

    def test_sensitivity(self):
        assert MatchSensitivity("balanced") == MatchSensitivity.BALANCED

    def test_workflow_phase(self):
        assert WorkflowPhase.PENDING_REVIEW.value == "pending_review"
