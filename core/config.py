"""Pipeline configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LLM_PROVIDERS = ("gemini", "mistral_cloud", "ollama", "none")


def _read_secret_file(path: str, env_name: str) -> str:
    """Read a secret value from file and return stripped content."""
    try:
        value = Path(path).read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ValueError(f"{env_name} points to unreadable file: {path}") from exc

    if not value:
        raise ValueError(f"{env_name} points to empty file: {path}")

    return value


class Settings(BaseSettings):
    """Settings loaded from environment variables and ``.env``.

    Read once by entry points and handed to ``ScriptAnalyzer.from_settings``;
    the pipeline itself never reads the environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="development", description="Environment: development, stage, prod")
    debug: bool = Field(default=False, description="Debug mode")

    # LLM Provider
    llm_provider: str = Field(
        default="gemini",
        description="LLM provider: gemini, mistral_cloud, ollama or none (heuristics only)",
    )

    # Gemini
    gemini_api_key: str = Field(default="", description="Google Gemini API key")
    gemini_api_key_file: str | None = Field(
        default=None,
        description="Optional file path containing the Gemini API key",
    )
    gemini_model: str = Field(default="gemini-1.5-flash", description="Gemini model name")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST base URL",
    )
    gemini_timeout: int = Field(default=120, description="Gemini request timeout in seconds")

    # Mistral Cloud
    mistral_api_key: str = Field(default="", description="Mistral API key")
    mistral_api_key_file: str | None = Field(
        default=None,
        description="Optional file path containing Mistral API key",
    )
    mistral_model: str = Field(default="mistral-large-latest", description="Mistral model name")
    mistral_timeout: int = Field(default=120, description="Mistral request timeout in seconds")

    # Ollama
    ollama_base_url: str = Field(default="http://localhost:11434", description="Ollama base URL")
    ollama_model: str = Field(default="mistral", description="Ollama model name")
    ollama_timeout: int = Field(default=120, description="Ollama request timeout in seconds")

    # Segmentation
    segmentation_max_chunk_chars: int = Field(
        default=15000, ge=1, description="Maximum characters per chunk body"
    )
    segmentation_overlap_ratio: float = Field(
        default=0.1, ge=0.0, le=0.5, description="Share of a chunk carried into the next"
    )
    segmentation_chunk_delay_seconds: float = Field(
        default=1.0, ge=0.0, description="Pause between model calls (rate limiting)"
    )
    segmentation_temperature: float = Field(
        default=0.2, ge=0.0, le=1.0, description="Sampling temperature for segmentation"
    )
    segmentation_max_output_tokens: int = Field(
        default=8192, ge=1, description="Maximum tokens the model may return per chunk"
    )
    segmentation_normalize_text: bool = Field(
        default=False, description="Clean page numbers/CONTINUED lines before segmenting"
    )

    # Prompts
    prompts_path: str | None = Field(
        default=None, description="Override path to prompts.yaml"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("llm_provider", mode="before")
    @classmethod
    def normalise_llm_provider(cls, v: Any) -> str:
        """Accept any casing and reject unknown providers early."""
        value = str(v or "none").strip().lower()
        if value not in LLM_PROVIDERS:
            raise ValueError(
                f"Invalid LLM provider: {value}. Valid options: {', '.join(LLM_PROVIDERS)}"
            )
        return value

    @model_validator(mode="before")
    @classmethod
    def load_secrets_from_files(cls, data: Any) -> Any:
        """Allow *_FILE settings to populate sensitive values from mounted secrets."""
        if not isinstance(data, dict):
            return data

        settings = dict(data)
        file_mapping = {
            "gemini_api_key_file": "gemini_api_key",
            "mistral_api_key_file": "mistral_api_key",
        }

        for file_field, target_field in file_mapping.items():
            file_path = settings.get(file_field)
            if file_path:
                settings[target_field] = _read_secret_file(file_path, file_field.upper())

        return settings

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env in {"prod", "production"}

    @property
    def llm_configured(self) -> bool:
        """Whether the selected provider has what it needs to be called."""
        if self.llm_provider == "gemini":
            return bool(self.gemini_api_key)
        if self.llm_provider == "mistral_cloud":
            return bool(self.mistral_api_key)
        if self.llm_provider == "ollama":
            return bool(self.ollama_base_url)
        return False

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Enforce sane settings when running in production."""
        if self.is_production and self.debug:
            raise ValueError("DEBUG must be false in production")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
