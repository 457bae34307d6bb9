"""LangChain chains for LLM operations."""

import json
import re

import structlog
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from tenacity import Retrying, stop_after_attempt, wait_exponential

from rollcall.config.prompts import (
    MATCHING_SYSTEM_PROMPT,
    MATCHING_USER_PROMPT,
    OBSERVATION_EXTRACTION_PROMPT,
    ROSTER_EXTRACTION_PROMPT,
)
from rollcall.errors import LLMChainError
from rollcall.llm.client import (
    create_llm_client,
    create_vision_llm_client,
    get_llm_settings,
    get_primary_model_name,
    get_vision_model_name,
)
from rollcall.models import ExtractionMode

logger = structlog.get_logger(__name__)


def _extract_json_from_text(text: str) -> str | None:
    """Return the first balanced ``{...}`` object found in text.

    Braces inside JSON strings are ignored, so a preamble such as
    "Here is the result:" or trailing commentary does not break extraction.
    """
    brace_count = 0
    start_idx = None
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        if escape_next:
            escape_next = False
            continue
        if char == "\\" and in_string:
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char == "{":
            if brace_count == 0:
                start_idx = i
            brace_count += 1
        elif char == "}" and brace_count > 0:
            brace_count -= 1
            if brace_count == 0 and start_idx is not None:
                return text[start_idx:i + 1]

    return None


def _clean_json_string(text: str) -> str:
    """Strip BOM/zero-width characters and trailing commas from LLM JSON."""
    text = text.strip("\ufeff\u200b\u200c\u200d")
    # Trailing commas before } or ] are a common LLM mistake
    return re.sub(r",(\s*[}\]])", r"\1", text)


def parse_json_response(response: str) -> dict:
    """Parse a JSON object from an LLM response, handling common issues.

    Args:
        response: Raw LLM response string.

    Returns:
        Parsed JSON dict.

    Raises:
        LLMChainError: If no JSON object can be recovered.
    """
    if not response or not response.strip():
        raise LLMChainError("Empty response from LLM")

    text = response.strip()

    logger.debug(
        "raw_llm_response",
        response_length=len(text),
        preview=text[:500],
    )

    # Markdown code block (```json ... ``` or bare ```)
    match = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text, re.IGNORECASE)
    if match and match.group(1).strip().startswith("{"):
        text = match.group(1).strip()

    try:
        parsed = json.loads(_clean_json_string(text))
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError as e:
        logger.debug("direct_parse_failed", error=str(e))

    extracted = _extract_json_from_text(text)
    if extracted:
        try:
            return json.loads(_clean_json_string(extracted))
        except json.JSONDecodeError as e:
            logger.debug("extracted_parse_failed", error=str(e))

    logger.error("json_parse_error", response_preview=text[:300])
    raise LLMChainError(f"Failed to parse LLM JSON response. Response preview: {text[:150]}")


def _retrying() -> Retrying:
    """Retry policy for one oracle round-trip.

    Defaults to a single attempt; ``LLM_MAX_ATTEMPTS`` raises it.
    """
    return Retrying(
        stop=stop_after_attempt(max(1, get_llm_settings().max_attempts)),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )


def _invoke(chain, variables: dict, context_name: str, model: str) -> str:
    """Invoke a chain under the retry policy and wrap backend failures."""
    try:
        for attempt in _retrying():
            with attempt:
                return chain.invoke(variables)
    except Exception as e:
        logger.error(f"{context_name}_failed", model=model, error=str(e))
        raise LLMChainError(f"{context_name} call to {model} failed: {e}") from e


def run_name_extraction_chain(image_base64: str, mode: ExtractionMode) -> str:
    """Read names out of one image.

    Args:
        image_base64: Base64-encoded image bytes (no ``data:`` prefix).
        mode: Whether the image is the official roster or a session capture.

    Returns:
        Raw newline-delimited model output. May be empty.
    """
    template = ROSTER_EXTRACTION_PROMPT if mode == ExtractionMode.ROSTER else OBSERVATION_EXTRACTION_PROMPT
    prompt = ChatPromptTemplate.from_messages([("human", template)])

    model = get_vision_model_name()
    llm = create_vision_llm_client().bind(images=[image_base64])
    chain = prompt | llm | StrOutputParser()

    logger.debug("running_name_extraction", mode=mode.value, model=model)
    response = _invoke(chain, {}, context_name="name_extraction", model=model)

    logger.debug(
        "name_extraction_complete",
        mode=mode.value,
        lines=len(response.splitlines()) if response else 0,
    )
    return response or ""


def run_matching_chain(
    roster_json: str,
    observations_json: str,
    sensitivity: str,
    sensitivity_rule: str,
) -> str:
    """Run the single cross-lingual matching request.

    Args:
        roster_json: JSON array of roster names.
        observations_json: JSON array of observed names.
        sensitivity: Sensitivity level name.
        sensitivity_rule: Instruction text for that level.

    Returns:
        Raw model output, expected to contain the JSON classification.

    Raises:
        LLMChainError: If the call fails or returns nothing.
    """
    prompt = ChatPromptTemplate.from_messages([
        ("system", MATCHING_SYSTEM_PROMPT),
        ("human", MATCHING_USER_PROMPT),
    ])

    model = get_primary_model_name()
    chain = prompt | create_llm_client() | StrOutputParser()

    logger.debug("running_matching", model=model, sensitivity=sensitivity)
    response = _invoke(
        chain,
        {
            "roster_json": roster_json,
            "observations_json": observations_json,
            "sensitivity": sensitivity,
            "sensitivity_rule": sensitivity_rule,
        },
        context_name="matching",
        model=model,
    )

    if not response or not response.strip():
        raise LLMChainError(f"Matching model {model} returned an empty response")

    logger.debug("matching_complete", model=model, response_length=len(response))
    return response
