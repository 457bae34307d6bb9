"""LLM client and chain configurations."""

from .client import LLMSettings, create_llm_client, create_vision_llm_client
from .chains import run_matching_chain, run_name_extraction_chain

__all__ = [
    "LLMSettings",
    "create_llm_client",
    "create_vision_llm_client",
    "run_name_extraction_chain",
    "run_matching_chain",
]
