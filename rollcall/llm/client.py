"""Ollama LLM client configuration."""

from functools import lru_cache

from langchain_ollama import OllamaLLM
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """LLM configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
    )

    ollama_base_url: str = "http://localhost:11434"
    model_name: str = "gpt-oss:20b"
    # Extraction reads screenshots, so it needs a multimodal model
    vision_model_name: str = "qwen2.5vl:7b"
    temperature: float = 0.0
    request_timeout: int = 120
    num_ctx: int = 8192
    num_predict: int = 4096  # Max tokens to generate
    max_attempts: int = 1


@lru_cache
def get_llm_settings() -> LLMSettings:
    """Get cached LLM settings."""
    return LLMSettings()


def create_llm_client(settings: LLMSettings | None = None) -> OllamaLLM:
    """Create the Ollama client used for the matching request.

    Args:
        settings: Optional custom settings. Uses defaults if not provided.

    Returns:
        Configured OllamaLLM instance.
    """
    settings = settings or get_llm_settings()

    return OllamaLLM(
        model=settings.model_name,
        base_url=settings.ollama_base_url,
        temperature=settings.temperature,
        timeout=settings.request_timeout,
        num_ctx=settings.num_ctx,
        num_predict=settings.num_predict,
        # JSON recovery happens in chains.parse_json_response
        streaming=False,
    )


def create_vision_llm_client(settings: LLMSettings | None = None) -> OllamaLLM:
    """Create the Ollama client used to read names out of images.

    Images are attached per call (``llm.bind(images=[...])``), not here.
    """
    settings = settings or get_llm_settings()

    return OllamaLLM(
        model=settings.vision_model_name,
        base_url=settings.ollama_base_url,
        temperature=settings.temperature,
        timeout=settings.request_timeout,
        num_ctx=settings.num_ctx,
        num_predict=settings.num_predict,
        streaming=False,
    )


def get_primary_model_name() -> str:
    """Get the matching model name from settings."""
    return get_llm_settings().model_name


def get_vision_model_name() -> str:
    """Get the extraction model name from settings."""
    return get_llm_settings().vision_model_name
