"""Extraction/matching oracle contract, backend and adapter."""

from .adapter import OracleAdapter
from .base import NameOracle
from .ollama import OllamaOracle

__all__ = ["NameOracle", "OracleAdapter", "OllamaOracle"]
