"""Mistral Cloud API provider (OpenAI-style chat completions)."""

from typing import Any

from core.exceptions import ConfigurationException
from llm.base import BaseLLMProvider


def chat_messages(prompt: str, system_prompt: str | None) -> list[dict[str, str]]:
    """Chat message list with the optional system turn first."""
    messages = [{"role": "user", "content": prompt}]
    if system_prompt:
        messages.insert(0, {"role": "system", "content": system_prompt})
    return messages


class MistralCloudProvider(BaseLLMProvider):
    """Mistral Cloud API provider."""

    def __init__(self, config: dict[str, Any]) -> None:
        """Initialize Mistral Cloud provider."""
        super().__init__(config)
        self.api_key = config.get("api_key")
        self.model = config.get("model", "mistral-large-latest")
        self.base_url = config.get("base_url", "https://api.mistral.ai/v1").rstrip("/")

        if not self.api_key:
            raise ConfigurationException("Mistral API key is required")

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 8192,
        **kwargs: Any,
    ) -> str:
        """Generate text using the chat completions endpoint."""
        result = await self._post_json(
            f"{self.base_url}/chat/completions",
            {
                "model": self.model,
                "messages": chat_messages(prompt, system_prompt),
                "temperature": temperature,
                "max_tokens": max_tokens,
                **kwargs,
            },
        )
        try:
            return result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise self._envelope_error(e)

    @property
    def health_url(self) -> str:
        return f"{self.base_url}/models"

    def request_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    @property
    def provider_name(self) -> str:
        """Get provider name."""
        return "mistral_cloud"
