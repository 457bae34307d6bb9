"""Application settings using Pydantic."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from rollcall.models.enums import MatchSensitivity


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Ollama LLM Configuration
    llm_ollama_base_url: str = "http://localhost:11434"
    llm_model_name: str = "gpt-oss:20b"
    llm_vision_model_name: str = "qwen2.5vl:7b"
    llm_temperature: float = 0.0
    llm_request_timeout: int = 120
    llm_num_ctx: int = 8192
    llm_max_attempts: int = 1

    # Matching Configuration
    match_sensitivity: MatchSensitivity = MatchSensitivity.BALANCED

    # Report Configuration
    report_language: Literal["en", "ar"] = "en"

    # Logging
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
