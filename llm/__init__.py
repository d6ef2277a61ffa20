"""LLM Provider package for the scene segmentation pipeline."""

from llm.base import BaseLLMProvider
from llm.factory import get_llm_provider

__all__ = ["get_llm_provider", "BaseLLMProvider"]
