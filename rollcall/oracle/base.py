"""Contract every extraction/matching backend has to satisfy."""

from typing import Protocol

from rollcall.models import ExtractionMode, ImagePayload, MatchingRequest


class NameOracle(Protocol):
    """Opaque service that reads names from images and matches name lists."""

    def extract_names(self, image: ImagePayload, mode: ExtractionMode) -> str:
        """Return newline-delimited names found in the image (may be empty)."""
        ...

    def match_names(self, request: MatchingRequest) -> str:
        """Return the raw structured classification for both lists."""
        ...
