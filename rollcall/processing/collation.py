"""Locale-aware ordering for mixed Arabic/Latin names."""

import unicodedata
from collections.abc import Iterable

from rollcall.models import Attendee

TATWEEL = "ـ"

# Arabic, Arabic Supplement, Arabic Extended-A, Presentation Forms-A and -B
ARABIC_RANGES = (
    (0x0600, 0x06FF),
    (0x0750, 0x077F),
    (0x08A0, 0x08FF),
    (0xFB50, 0xFDFF),
    (0xFE70, 0xFEFF),
)


def is_arabic_letter(char: str) -> bool:
    code = ord(char)
    return any(low <= code <= high for low, high in ARABIC_RANGES)


def script_rank(name: str) -> int:
    """0 when the first letter of ``name`` is Arabic, else 1."""
    for char in name:
        if char.isalpha():
            return 0 if is_arabic_letter(char) else 1
    return 1


def collation_key(name: str) -> tuple[int, str, str]:
    """Sort key following Arabic-locale order: Arabic script before Latin.

    Within a script, case, diacritics and tatweel are ignored. NFKD folds
    Arabic presentation forms and splits hamza/madda carriers (أ إ آ) and
    harakat into combining marks, which are then dropped, so spelling
    variants of the same letter sort together. The raw string is the
    tie-breaker, which keeps the order total and deterministic.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(
        c for c in decomposed if not unicodedata.combining(c) and c != TATWEEL
    )
    return script_rank(base), base.casefold(), name


def sort_names(names: Iterable[str]) -> list[str]:
    return sorted(names, key=collation_key)


def sort_attendees(attendees: Iterable[Attendee]) -> list[Attendee]:
    return sorted(attendees, key=lambda a: collation_key(a.name))
