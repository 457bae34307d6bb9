"""Roster and observation name extraction."""

from .names import clean_extracted_lines, is_candidate_name, normalize_name
from .observations import extract_observations, iter_image_names, merge_observations
from .roster import (
    extract_roster,
    extract_roster_from_image,
    extract_roster_from_rows,
    read_spreadsheet_rows,
)

__all__ = [
    "clean_extracted_lines",
    "is_candidate_name",
    "normalize_name",
    "extract_observations",
    "iter_image_names",
    "merge_observations",
    "extract_roster",
    "extract_roster_from_image",
    "extract_roster_from_rows",
    "read_spreadsheet_rows",
]
