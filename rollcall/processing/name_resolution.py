"""Snap names echoed back by the oracle onto the names that were sent."""

import structlog
from rapidfuzz import fuzz, process

logger = structlog.get_logger(__name__)

# Threshold for fuzzy name matching
NAME_MATCH_THRESHOLD = 85


def _normalize(text: str) -> str:
    return " ".join(text.split())


def resolve_name(name: str, candidates: list[str]) -> str | None:
    """Find the candidate the oracle meant by ``name``.

    Exact match first, then whitespace/case-insensitive match, then the best
    rapidfuzz ratio at or above ``NAME_MATCH_THRESHOLD``.

    Args:
        name: Name as returned by the oracle.
        candidates: Names that were sent in the request.

    Returns:
        The matching candidate, or None if nothing is close enough.
    """
    if name in candidates:
        return name

    folded = _normalize(name).casefold()
    for candidate in candidates:
        if candidate.casefold() == folded:
            return candidate

    best = process.extractOne(
        folded,
        candidates,
        scorer=fuzz.ratio,
        processor=lambda s: _normalize(s).casefold(),
        score_cutoff=NAME_MATCH_THRESHOLD,
    )
    if best is None:
        return None

    candidate, score, _ = best
    logger.debug("name_resolved_fuzzy", returned=name, resolved=candidate, score=round(score, 1))
    return candidate

