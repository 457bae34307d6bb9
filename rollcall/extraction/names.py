"""Name normalization and candidate filtering shared by both extractors."""

import re

# Roster cell filter
MIN_ROSTER_NAME_LENGTH = 5  # exclusive
MIN_ROSTER_NAME_TOKENS = 2

# Oracle extraction filter
MIN_EXTRACTED_NAME_LENGTH = 2  # exclusive

# "- Name", "* Name", "• Name", "1. Name", "12) Name"
_LIST_MARKER_PATTERN = re.compile(r"^(?:[-*•·]+|\d{1,3}[.)])\s*")

# Meeting-client status tags appended to display names
_STATUS_MARKER_PATTERN = re.compile(
    r"\(\s*(?:host|co-?host|me|you|guest|المضيف|المضيف المشارك|أنا|ضيف)\s*\)",
    re.IGNORECASE,
)


def normalize_name(text: str) -> str:
    """Trim and collapse internal whitespace runs to a single space."""
    return " ".join(text.split())


def strip_status_markers(text: str) -> str:
    """Remove tags such as ``(Host)`` or ``(Me)`` from a display name."""
    return _STATUS_MARKER_PATTERN.sub(" ", text)


def is_numeric(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def is_candidate_name(value: str) -> bool:
    """Decide whether a roster cell looks like a person's full name.

    A candidate is longer than five characters, has at least two
    whitespace-separated tokens and does not parse as a number.
    """
    text = normalize_name(value)
    if not text or len(text) <= MIN_ROSTER_NAME_LENGTH:
        return False
    if len(text.split()) < MIN_ROSTER_NAME_TOKENS:
        return False
    return not is_numeric(text)


def dedupe(names) -> list[str]:
    """Exact-string deduplication keeping first-seen order."""
    return list(dict.fromkeys(names))


def clean_extracted_lines(text: str, drop_status_markers: bool = False) -> list[str]:
    """Turn newline-delimited oracle output into a deduplicated name list.

    Args:
        text: Raw extraction output.
        drop_status_markers: Strip meeting status tags (observation mode).

    Returns:
        Names longer than two characters, in first-seen order.
    """
    names = []
    for line in (text or "").splitlines():
        line = _LIST_MARKER_PATTERN.sub("", line.strip())
        if drop_status_markers:
            line = strip_status_markers(line)
        name = normalize_name(line)
        if len(name) > MIN_EXTRACTED_NAME_LENGTH:
            names.append(name)
    return dedupe(names)
