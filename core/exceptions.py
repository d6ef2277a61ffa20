"""Custom exceptions for the scene segmentation pipeline."""

from typing import Any


class SceneSplitException(Exception):
    """Base exception for the scene segmentation pipeline."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationException(SceneSplitException, ValueError):
    """Raised when pipeline or provider configuration is invalid."""

    pass


class ParsingException(SceneSplitException):
    """Raised when a model reply cannot be parsed into scenes."""

    pass


class LLMException(SceneSplitException):
    """Raised when LLM provider interaction fails."""

    pass
