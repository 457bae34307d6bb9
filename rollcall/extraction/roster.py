"""Roster extraction from spreadsheets and photographed lists."""

from collections.abc import Iterable, Iterator
from datetime import date, datetime, time
from io import BytesIO
from typing import TYPE_CHECKING, Any
from zipfile import BadZipFile

import structlog
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from rollcall.errors import RosterExtractionError
from rollcall.models import ExtractionMode, ImagePayload, RosterSource, RosterSourceKind

from .names import dedupe, is_candidate_name, normalize_name

if TYPE_CHECKING:
    from rollcall.oracle.adapter import OracleAdapter

logger = structlog.get_logger(__name__)


def read_spreadsheet_rows(data: bytes) -> Iterator[tuple[Any, ...]]:
    """Yield the rows of the first worksheet as tuples of cell values.

    Raises:
        RosterExtractionError: If the bytes are not a readable workbook.
    """
    try:
        workbook = load_workbook(BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        logger.error("spreadsheet_unreadable", error=str(e))
        raise RosterExtractionError(
            f"Could not read the roster spreadsheet; make sure it is a valid, unprotected .xlsx file ({e})"
        ) from e

    try:
        worksheet = workbook.worksheets[0]
        logger.debug("spreadsheet_opened", sheet=worksheet.title, sheets=len(workbook.worksheets))
        yield from worksheet.iter_rows(values_only=True)
    finally:
        workbook.close()


def _cell_text(value: Any) -> str | None:
    """String form of a cell, or None for empty and date/time cells."""
    if value is None or isinstance(value, (datetime, date, time)):
        return None
    return normalize_name(str(value))


def extract_roster_from_rows(rows: Iterable[Iterable[Any]]) -> list[str]:
    """Collect candidate names from every cell of a grid.

    Args:
        rows: Rectangular (or ragged) grid of cell values.

    Returns:
        Unique candidate names in first-seen order.
    """
    candidates = []
    cells_seen = 0
    for row in rows:
        for value in row:
            cells_seen += 1
            text = _cell_text(value)
            if text and is_candidate_name(text):
                candidates.append(text)

    names = dedupe(candidates)
    logger.debug("roster_cells_scanned", cells=cells_seen, candidates=len(candidates), unique=len(names))
    return names


def extract_roster_from_image(adapter: "OracleAdapter", image: ImagePayload) -> list[str]:
    """Read the roster from an image via the oracle's roster mode."""
    return adapter.extract_names(image, ExtractionMode.ROSTER)


def extract_roster(source: RosterSource, adapter: "OracleAdapter") -> list[str]:
    """Extract roster names from either kind of source.

    There is no fallback between modes.

    Raises:
        RosterExtractionError: The source yields zero candidate names.
    """
    logger.info("extracting_roster", kind=source.kind.value, label=source.label)

    if source.kind == RosterSourceKind.SPREADSHEET:
        names = extract_roster_from_rows(read_spreadsheet_rows(source.data))
    else:
        names = extract_roster_from_image(adapter, source.as_image())

    if not names:
        logger.error("roster_empty", kind=source.kind.value, label=source.label)
        raise RosterExtractionError(
            f"No names were found in the roster '{source.label}'. Check the file or image quality."
        )

    logger.info("roster_extracted", count=len(names))
    return names
