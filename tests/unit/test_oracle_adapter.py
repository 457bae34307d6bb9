"""Unit tests for the matching oracle adapter."""

import json

import pytest

from rollcall.errors import OracleContractError
from rollcall.models import AttendanceStatus, MatchSensitivity
from rollcall.oracle import OracleAdapter


@pytest.fixture
def request_(adapter):
    return adapter.build_request(
        roster=["Sara Mahmoud", "Ahmed Hassan", "Omar Khaled"],
        observations=["سارة محمود", "Guest Laptop", "Ahmed H."],
    )


class TestBuildRequest:
    """Tests for deterministic request serialization."""

    def test_lists_are_sorted(self, request_):
        assert request_.roster == ["Ahmed Hassan", "Omar Khaled", "Sara Mahmoud"]
        assert request_.observations == ["سارة محمود", "Ahmed H.", "Guest Laptop"]

    def test_input_order_does_not_matter(self, adapter):
        a = adapter.build_request(["Omar Khaled", "Ahmed Hassan"], ["Mona Said", "Ahmed H."])
        b = adapter.build_request(["Ahmed Hassan", "Omar Khaled"], ["Ahmed H.", "Mona Said"])
        assert a.model_dump_json() == b.model_dump_json()

    def test_duplicates_and_blanks_removed(self, adapter):
        request = adapter.build_request(["Ahmed Hassan", " Ahmed  Hassan ", ""], [])
        assert request.roster == ["Ahmed Hassan"]
        assert request.observations == []

    def test_sensitivity_carried(self, adapter):
        request = adapter.build_request(["Ahmed Hassan"], ["Ahmed"], MatchSensitivity.STRICT)
        assert request.sensitivity == MatchSensitivity.STRICT


class TestParseResponse:
    """Tests for response validation and mapping."""

    def test_valid_response(self, adapter, request_, matching_payload):
        result = adapter.parse_response(json.dumps(matching_payload, ensure_ascii=False), request_)

        assert [a.name for a in result.present] == ["Ahmed Hassan", "Sara Mahmoud"]
        assert result.present[1].original_name == "سارة محمود"
        assert all(a.status == AttendanceStatus.PRESENT for a in result.present)
        assert result.absent[0].status == AttendanceStatus.ABSENT
        assert result.unexpected[0].name == "Guest Laptop"
        assert result.unexpected[0].status == AttendanceStatus.UNEXPECTED

    def test_code_fenced_response(self, adapter, request_):
        text = 'Sure:\n```json\n{"present": [], "absent": ["Omar Khaled"], "unexpected": []}\n```'
        result = adapter.parse_response(text, request_)
        assert [a.name for a in result.absent] == ["Omar Khaled"]

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "I could not match these names.",
            '{"present": [], "absent": []}',
            '{"present": {}, "absent": [], "unexpected": []}',
            '{"present": [{"originalName": "Ahmed H."}], "absent": [], "unexpected": []}',
            '{"present": [], "absent": "Omar Khaled", "unexpected": []}',
        ],
    )
    def test_contract_violations(self, adapter, request_, text):
        with pytest.raises(OracleContractError):
            adapter.parse_response(text, request_)

    def test_names_snapped_to_request(self, adapter, request_):
        text = json.dumps({
            "present": [{"name": "ahmed  hassan", "originalName": "Ahmed H"}],
            "absent": ["Omar Khalid"],
            "unexpected": ["Guest laptop"],
        })
        result = adapter.parse_response(text, request_)

        assert result.present[0].name == "Ahmed Hassan"
        assert result.present[0].original_name == "Ahmed H."
        assert result.absent[0].name == "Omar Khaled"
        assert result.unexpected[0].name == "Guest Laptop"

    def test_unknown_names_kept(self, adapter, request_):
        text = json.dumps({"present": [], "absent": [], "unexpected": ["Completely Different"]})
        result = adapter.parse_response(text, request_)
        assert result.unexpected[0].name == "Completely Different"

    def test_blank_entries_dropped(self, adapter, request_):
        text = json.dumps({
            "present": [{"name": "Ahmed Hassan", "originalName": ""}, {"name": " "}],
            "absent": ["", "Omar Khaled"],
            "unexpected": [],
        })
        result = adapter.parse_response(text, request_)

        assert len(result.present) == 1
        assert result.present[0].original_name is None
        assert [a.name for a in result.absent] == ["Omar Khaled"]


class TestClassify:
    """Tests for the single matching round-trip."""

    def test_one_request_with_both_lists(self, screenshot_oracle):
        adapter = OracleAdapter(screenshot_oracle)

        result = adapter.classify(
            ["Ahmed Hassan", "Sara Mahmoud", "Omar Khaled"],
            ["Ahmed H.", "سارة محمود", "Guest Laptop"],
        )

        assert len(screenshot_oracle.match_requests) == 1
        sent = screenshot_oracle.match_requests[0]
        assert len(sent.roster) == 3
        assert len(sent.observations) == 3
        assert result.total == 4

    def test_malformed_response_is_fatal(self, fake_oracle_cls):
        adapter = OracleAdapter(fake_oracle_cls(match_response='{"present": []}'))
        with pytest.raises(OracleContractError):
            adapter.classify(["Ahmed Hassan"], ["Ahmed H."])
