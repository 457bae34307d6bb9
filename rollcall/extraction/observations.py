"""Observed names aggregated across session-capture images."""

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

import structlog

from rollcall.models import ExtractionMode, ImageExtraction, ImagePayload

from .names import dedupe

if TYPE_CHECKING:
    from rollcall.oracle.adapter import OracleAdapter

logger = structlog.get_logger(__name__)


def iter_image_names(
    images: Sequence[ImagePayload],
    adapter: "OracleAdapter",
) -> Iterator[ImageExtraction]:
    """Extract names one image at a time, in order.

    A failing image degrades to an empty result with ``error`` set; it is
    logged as a warning and never stops the batch.

    Yields:
        One ImageExtraction per image.
    """
    for index, image in enumerate(images, start=1):
        try:
            names = adapter.extract_names(image, ExtractionMode.OBSERVATION)
        except Exception as e:
            logger.warning("image_extraction_failed", index=index, label=image.label, error=str(e))
            yield ImageExtraction(index=index, label=image.label, error=str(e) or type(e).__name__)
            continue

        logger.debug("image_extracted", index=index, label=image.label, names=len(names))
        yield ImageExtraction(index=index, label=image.label, names=names)


def merge_observations(results: Sequence[ImageExtraction]) -> list[str]:
    """Union of all per-image names, exact-string deduplicated."""
    return dedupe(name for result in results for name in result.names)


def extract_observations(
    images: Sequence[ImagePayload],
    adapter: "OracleAdapter",
) -> tuple[list[str], list[ImageExtraction]]:
    """Extract and merge names from every image.

    Returns:
        Tuple of (unique observed names, per-image results).
    """
    results = list(iter_image_names(images, adapter))
    names = merge_observations(results)
    logger.info(
        "observations_extracted",
        images=len(results),
        failed=sum(1 for r in results if r.failed),
        names=len(names),
    )
    return names, results
