"""Factory for creating LLM providers from settings."""

import logging
from typing import Any

from core.config import Settings
from core.exceptions import ConfigurationException
from llm.base import BaseLLMProvider
from llm.gemini import GeminiProvider
from llm.mistral_cloud import MistralCloudProvider
from llm.ollama import OllamaProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[BaseLLMProvider]] = {
    "gemini": GeminiProvider,
    "mistral_cloud": MistralCloudProvider,
    "ollama": OllamaProvider,
}


def provider_config(settings: Settings) -> dict[str, Any]:
    """Provider constructor config for ``settings.llm_provider``."""
    name = settings.llm_provider
    if name == "gemini":
        return {
            "api_key": settings.gemini_api_key,
            "model": settings.gemini_model,
            "base_url": settings.gemini_base_url,
            "timeout": settings.gemini_timeout,
        }
    if name == "mistral_cloud":
        return {
            "api_key": settings.mistral_api_key,
            "model": settings.mistral_model,
            "timeout": settings.mistral_timeout,
        }
    if name == "ollama":
        return {
            "base_url": settings.ollama_base_url,
            "model": settings.ollama_model,
            "timeout": settings.ollama_timeout,
        }
    raise ConfigurationException(
        f"No provider configuration for {name!r}", details={"provider": name}
    )


def get_llm_provider(settings: Settings) -> BaseLLMProvider | None:
    """
    Create the LLM provider selected in settings.

    Args:
        settings: Pipeline settings

    Returns:
        Initialized LLM provider, or None when no provider is selected or
        its credential is missing (the pipeline then runs heuristics only)
    """
    name = settings.llm_provider

    if name == "none":
        logger.info("LLM provider disabled, using heuristic segmentation")
        return None

    if not settings.llm_configured:
        logger.info(f"LLM provider {name} not configured, using heuristic segmentation")
        return None

    logger.info(f"Initializing LLM provider: {name}")
    return PROVIDER_CLASSES[name](provider_config(settings))


async def check_llm_provider(provider: BaseLLMProvider) -> bool:
    """
    Probe a provider with a health check and a tiny generation.

    Args:
        provider: LLM provider to check

    Returns:
        True if both succeed
    """
    try:
        if not await provider.health_check():
            logger.error(f"Provider {provider.provider_name} health check failed")
            return False

        response = await provider.generate(
            prompt="Reply with the JSON array [] and nothing else.",
            temperature=0.1,
            max_tokens=50,
        )
    except Exception as e:
        logger.error(f"Provider {provider.provider_name} check failed: {e}")
        return False

    if not response:
        logger.error(f"Provider {provider.provider_name} returned empty response")
        return False

    logger.info(f"Provider {provider.provider_name} check successful")
    logger.debug(f"Check response: {response}")
    return True
