"""Tests for pipeline settings parsing."""

import pytest

from core.config import Settings, get_settings


def test_defaults():
    """Defaults match the documented pipeline constants."""
    settings = Settings(_env_file=None)
    assert settings.llm_provider == "gemini"
    assert settings.segmentation_max_chunk_chars == 15000
    assert settings.segmentation_overlap_ratio == 0.1
    assert settings.segmentation_chunk_delay_seconds == 1.0
    assert settings.segmentation_temperature == 0.2
    assert settings.segmentation_max_output_tokens == 8192
    assert settings.segmentation_normalize_text is False
    assert settings.llm_configured is False


def test_segmentation_settings_from_env(monkeypatch):
    """Read segmentation parameters from environment variables."""
    monkeypatch.setenv("SEGMENTATION_MAX_CHUNK_CHARS", "5000")
    monkeypatch.setenv("SEGMENTATION_OVERLAP_RATIO", "0.2")
    monkeypatch.setenv("SEGMENTATION_NORMALIZE_TEXT", "true")
    settings = Settings(_env_file=None)
    assert settings.segmentation_max_chunk_chars == 5000
    assert settings.segmentation_overlap_ratio == 0.2
    assert settings.segmentation_normalize_text is True


def test_llm_provider_case_insensitive(monkeypatch):
    """Normalise provider names from env."""
    monkeypatch.setenv("LLM_PROVIDER", "OLLAMA")
    settings = Settings(_env_file=None)
    assert settings.llm_provider == "ollama"
    assert settings.llm_configured is True


def test_invalid_llm_provider_raises():
    """Reject unknown providers at load time."""
    with pytest.raises(ValueError):
        Settings(_env_file=None, llm_provider="openai")


def test_overlap_ratio_out_of_range_raises():
    """Reject overlap ratios above one half."""
    with pytest.raises(ValueError):
        Settings(_env_file=None, segmentation_overlap_ratio=0.7)


def test_gemini_key_from_file(tmp_path):
    """Load the Gemini key from a mounted secret file."""
    key_file = tmp_path / "gemini_key"
    key_file.write_text("secret-key\n", encoding="utf-8")
    settings = Settings(_env_file=None, gemini_api_key_file=str(key_file))
    assert settings.gemini_api_key == "secret-key"
    assert settings.llm_configured is True


def test_mistral_key_file_from_env(tmp_path, monkeypatch):
    """*_FILE variables work through the environment too."""
    key_file = tmp_path / "mistral_key"
    key_file.write_text("mistral-secret", encoding="utf-8")
    monkeypatch.setenv("MISTRAL_API_KEY_FILE", str(key_file))
    monkeypatch.setenv("LLM_PROVIDER", "mistral_cloud")
    settings = Settings(_env_file=None)
    assert settings.mistral_api_key == "mistral-secret"
    assert settings.llm_configured is True


def test_empty_secret_file_raises(tmp_path):
    """Treat an empty secret file as a configuration error."""
    key_file = tmp_path / "empty"
    key_file.write_text("  \n", encoding="utf-8")
    with pytest.raises(ValueError):
        Settings(_env_file=None, gemini_api_key_file=str(key_file))


def test_missing_secret_file_raises(tmp_path):
    """Treat an unreadable secret file as a configuration error."""
    with pytest.raises(ValueError):
        Settings(_env_file=None, gemini_api_key_file=str(tmp_path / "missing"))


def test_debug_rejected_in_production():
    """DEBUG must be off in production."""
    with pytest.raises(ValueError):
        Settings(_env_file=None, env="prod", debug=True)


def test_get_settings_is_cached():
    """get_settings returns one shared instance."""
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
