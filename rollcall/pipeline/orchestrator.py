"""Analysis pipeline: roster → observations → one matching request.

The pipeline is a generator of ProgressEvent objects whose return value is
the AnalysisResult, so callers see each step in the order it happens:

    result = yield from run_analysis(source, images, adapter)

Observation images are processed strictly one at a time; the "scanning"
event for an image is emitted before its oracle round-trip starts.
"""

from collections.abc import Generator, Sequence
from datetime import datetime

import structlog

from rollcall.extraction import extract_roster, iter_image_names, merge_observations
from rollcall.models import (
    AnalysisResult,
    ImagePayload,
    MatchSensitivity,
    ProgressEvent,
    RosterSource,
)
from rollcall.oracle import OracleAdapter

logger = structlog.get_logger(__name__)


def run_analysis(
    roster_source: RosterSource,
    images: Sequence[ImagePayload],
    adapter: OracleAdapter,
    sensitivity: MatchSensitivity = MatchSensitivity.BALANCED,
) -> Generator[ProgressEvent, None, AnalysisResult]:
    """Run extraction and matching for one analysis.

    Args:
        roster_source: Official roster (spreadsheet or image).
        images: Session-capture images, in upload order.
        adapter: Oracle adapter used for every extraction and the match.
        sensitivity: Matching sensitivity passed to the oracle.

    Yields:
        Progress events in a stable order.

    Returns:
        AnalysisResult holding the raw classification.

    Raises:
        RosterExtractionError: The roster yields no names.
        OracleError: The matching round-trip fails or breaks the contract.
    """
    start = datetime.now()
    warnings: list[str] = []
    logger.info("analysis_start", roster=roster_source.label, images=len(images), sensitivity=sensitivity.value)

    # Stage 1: Roster
    yield ProgressEvent(stage="roster", message=f"Reading the official roster ({roster_source.label})...")
    roster = extract_roster(roster_source, adapter)
    yield ProgressEvent(stage="roster", message=f"Extracted {len(roster)} names from the roster.")

    # Stage 2: Observations, one image at a time
    total = len(images)
    extractions = iter_image_names(images, adapter)
    results = []
    for index, image in enumerate(images, start=1):
        yield ProgressEvent(
            stage="observation",
            message=f"Scanning screenshot {index} of {total} ({image.label})...",
            current=index,
            total=total,
        )
        result = next(extractions)
        results.append(result)
        if result.failed:
            warning = f"Screenshot {index} ({result.label}) could not be read and was skipped: {result.error}"
            warnings.append(warning)
            yield ProgressEvent(stage="observation", message=warning, current=index, total=total, level="warning")

    observed = merge_observations(results)
    yield ProgressEvent(stage="observation", message=f"Found {len(observed)} distinct names in the screenshots.")

    # Stage 3: Single matching request
    yield ProgressEvent(stage="matching", message="Matching names across languages...")
    classification = adapter.classify(roster, observed, sensitivity)

    duration = (datetime.now() - start).total_seconds()
    logger.info(
        "analysis_complete",
        duration_seconds=round(duration, 2),
        roster=len(roster),
        observed=len(observed),
        failed_images=sum(1 for r in results if r.failed),
    )

    return AnalysisResult(
        roster_names=roster,
        observed_names=observed,
        classification=classification,
        images=results,
        warnings=warnings,
        duration_seconds=duration,
    )
