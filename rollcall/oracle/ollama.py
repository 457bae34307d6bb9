"""NameOracle backed by local Ollama models through LangChain."""

import json

import structlog

from rollcall.config.prompts import SENSITIVITY_RULES
from rollcall.llm.chains import run_matching_chain, run_name_extraction_chain
from rollcall.models import ExtractionMode, ImagePayload, MatchingRequest

logger = structlog.get_logger(__name__)


class OllamaOracle:
    """Vision model for extraction, text model for matching."""

    def extract_names(self, image: ImagePayload, mode: ExtractionMode) -> str:
        logger.debug("oracle_extract", label=image.label, mode=mode.value, size=len(image.data))
        return run_name_extraction_chain(image.to_base64(), mode)

    def match_names(self, request: MatchingRequest) -> str:
        logger.debug(
            "oracle_match",
            roster=len(request.roster),
            observations=len(request.observations),
            sensitivity=request.sensitivity.value,
        )
        return run_matching_chain(
            roster_json=json.dumps(request.roster, ensure_ascii=False),
            observations_json=json.dumps(request.observations, ensure_ascii=False),
            sensitivity=request.sensitivity.value,
            sensitivity_rule=SENSITIVITY_RULES[request.sensitivity.value],
        )
