"""Typed boundary between the engine and whatever backend does the matching.

The adapter trims extraction output, serializes the matching request
deterministically, validates the response shape and maps it onto
attendees. Nothing downstream ever sees an unchecked parsed structure.
"""

import structlog
from pydantic import ValidationError

from rollcall.errors import LLMChainError, OracleContractError
from rollcall.extraction.names import clean_extracted_lines, dedupe, normalize_name
from rollcall.llm.chains import parse_json_response
from rollcall.models import (
    AttendanceStatus,
    Attendee,
    Classification,
    ExtractionMode,
    ImagePayload,
    MatchingRequest,
    MatchingResponse,
    MatchSensitivity,
)
from rollcall.processing.collation import sort_names
from rollcall.processing.name_resolution import resolve_name

from .base import NameOracle

logger = structlog.get_logger(__name__)


def _validation_summary(error: ValidationError) -> str:
    parts = []
    for item in error.errors()[:5]:
        location = ".".join(str(p) for p in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class OracleAdapter:
    """Wraps a NameOracle with request building and response validation."""

    def __init__(self, oracle: NameOracle) -> None:
        self._oracle = oracle

    def extract_names(self, image: ImagePayload, mode: ExtractionMode) -> list[str]:
        """Run one extraction call and clean its newline-delimited output.

        Empty output is valid and yields an empty list.
        """
        raw = self._oracle.extract_names(image, mode)
        names = clean_extracted_lines(raw, drop_status_markers=mode == ExtractionMode.OBSERVATION)
        logger.debug("names_extracted", label=image.label, mode=mode.value, count=len(names))
        return names

    def build_request(
        self,
        roster: list[str],
        observations: list[str],
        sensitivity: MatchSensitivity = MatchSensitivity.BALANCED,
    ) -> MatchingRequest:
        """Normalize, deduplicate and collation-sort both lists."""
        roster = [n for n in (normalize_name(n) for n in roster) if n]
        observations = [n for n in (normalize_name(n) for n in observations) if n]
        return MatchingRequest(
            roster=sort_names(dedupe(roster)),
            observations=sort_names(dedupe(observations)),
            sensitivity=sensitivity,
        )

    def parse_response(self, text: str, request: MatchingRequest) -> Classification:
        """Validate a matching response and map it to attendees.

        Args:
            text: Raw oracle output.
            request: The request it answers; used to canonicalize names.

        Returns:
            Raw (unsorted) classification with statuses set per bucket.

        Raises:
            OracleContractError: Text is not a JSON object or does not carry
                the three required arrays with the right element types.
        """
        try:
            payload = parse_json_response(text)
        except LLMChainError as e:
            raise OracleContractError(f"Matching response is not valid JSON: {e}") from e

        try:
            response = MatchingResponse.model_validate(payload)
        except ValidationError as e:
            logger.error("matching_response_invalid", errors=e.error_count())
            raise OracleContractError(
                f"Matching response has the wrong shape: {_validation_summary(e)}"
            ) from e

        present = []
        for pair in response.present:
            name = self._canonical(pair.name, request.roster, "roster")
            if name is None:
                continue
            original = self._canonical(pair.original_name or "", request.observations, "observation")
            present.append(Attendee(name=name, status=AttendanceStatus.PRESENT, original_name=original))

        absent = [
            Attendee(name=name, status=AttendanceStatus.ABSENT)
            for name in (self._canonical(n, request.roster, "roster") for n in response.absent)
            if name
        ]
        unexpected = [
            Attendee(name=name, status=AttendanceStatus.UNEXPECTED)
            for name in (self._canonical(n, request.observations, "observation") for n in response.unexpected)
            if name
        ]

        logger.info(
            "matching_response_parsed",
            present=len(present),
            absent=len(absent),
            unexpected=len(unexpected),
        )
        return Classification(present=present, absent=absent, unexpected=unexpected)

    def classify(
        self,
        roster: list[str],
        observations: list[str],
        sensitivity: MatchSensitivity = MatchSensitivity.BALANCED,
    ) -> Classification:
        """Issue the single matching request for a run and parse its answer."""
        request = self.build_request(roster, observations, sensitivity)
        logger.info(
            "matching_requested",
            roster=len(request.roster),
            observations=len(request.observations),
            sensitivity=sensitivity.value,
        )
        text = self._oracle.match_names(request)
        return self.parse_response(text, request)

    @staticmethod
    def _canonical(name: str, candidates: list[str], side: str) -> str | None:
        """Map a returned name onto the request; None for blank names."""
        name = normalize_name(name)
        if not name:
            return None
        resolved = resolve_name(name, candidates)
        if resolved is None:
            logger.warning("oracle_name_not_in_request", name=name, side=side)
            return name
        return resolved
