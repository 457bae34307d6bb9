"""Enumeration types for the reconciliation models."""

from enum import Enum


class AttendanceStatus(str, Enum):
    """Bucket a person is classified into."""

    PRESENT = "present"
    ABSENT = "absent"
    UNEXPECTED = "unexpected"


class MatchSensitivity(str, Enum):
    """How aggressively the oracle may pair differing spellings."""

    STRICT = "strict"
    BALANCED = "balanced"
    FLEXIBLE = "flexible"


class ExtractionMode(str, Enum):
    """What kind of image an extraction call is reading."""

    ROSTER = "roster"
    OBSERVATION = "observation"


class RosterSourceKind(str, Enum):
    """Format of the official roster."""

    SPREADSHEET = "spreadsheet"
    IMAGE = "image"


class WorkflowPhase(str, Enum):
    """Lifecycle of one analysis and its review."""

    IDLE = "idle"
    ANALYSIS_RUNNING = "analysis_running"
    PENDING_REVIEW = "pending_review"
    FINALIZED = "finalized"
