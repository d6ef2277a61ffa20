"""Ollama local LLM provider."""

import logging
from typing import Any

import httpx

from llm.base import HEALTH_CHECK_TIMEOUT, BaseLLMProvider
from llm.mistral_cloud import chat_messages

logger = logging.getLogger(__name__)


class OllamaProvider(BaseLLMProvider):
    """Ollama provider using the non-streaming ``/api/chat`` endpoint.

    Needs no credential; the model must already be pulled on the server.
    """

    def __init__(self, config: dict[str, Any]) -> None:
        """Initialize Ollama provider."""
        super().__init__(config)
        self.base_url = config.get("base_url", "http://localhost:11434").rstrip("/")
        self.model = config.get("model", "mistral")

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 8192,
        **kwargs: Any,
    ) -> str:
        """Generate text using the Ollama chat API."""
        result = await self._post_json(
            f"{self.base_url}/api/chat",
            {
                "model": self.model,
                "messages": chat_messages(prompt, system_prompt),
                "stream": False,
                # Ollama calls the output limit num_predict
                "options": {"temperature": temperature, "num_predict": max_tokens, **kwargs},
            },
        )
        try:
            return result["message"]["content"]
        except (KeyError, TypeError) as e:
            raise self._envelope_error(e, base_url=self.base_url)

    @property
    def health_url(self) -> str:
        return f"{self.base_url}/api/tags"

    async def list_models(self) -> list[str]:
        """Names of the models available on the Ollama server ([] if unreachable)."""
        try:
            async with self._client(HEALTH_CHECK_TIMEOUT) as client:
                response = await client.get(self.health_url)
                response.raise_for_status()
                return [model["name"] for model in response.json().get("models", [])]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error(f"Failed to list Ollama models: {e}")
            return []

    @property
    def provider_name(self) -> str:
        """Get provider name."""
        return "ollama"
