"""Pydantic data models for the pipeline."""

from .enums import (
    AttendanceStatus,
    ExtractionMode,
    MatchSensitivity,
    RosterSourceKind,
    WorkflowPhase,
)
from .attendance import Attendee, Classification
from .sources import ImagePayload, RosterSource
from .matching import MatchedPair, MatchingRequest, MatchingResponse
from .progress import AnalysisResult, ImageExtraction, ProgressEvent

__all__ = [
    # Enums
    "AttendanceStatus",
    "ExtractionMode",
    "MatchSensitivity",
    "RosterSourceKind",
    "WorkflowPhase",
    # Attendance
    "Attendee",
    "Classification",
    # Sources
    "ImagePayload",
    "RosterSource",
    # Matching
    "MatchedPair",
    "MatchingRequest",
    "MatchingResponse",
    # Progress
    "ProgressEvent",
    "ImageExtraction",
    "AnalysisResult",
]
