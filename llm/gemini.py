"""Google Gemini (Generative Language REST API) provider."""

from typing import Any

from core.exceptions import ConfigurationException
from llm.base import BaseLLMProvider

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider(BaseLLMProvider):
    """Gemini provider using the ``generateContent`` endpoint."""

    def __init__(self, config: dict[str, Any]) -> None:
        """Initialize Gemini provider."""
        super().__init__(config)
        self.api_key = config.get("api_key")
        self.model = config.get("model", DEFAULT_GEMINI_MODEL)
        self.base_url = config.get("base_url", DEFAULT_GEMINI_BASE_URL).rstrip("/")

        if not self.api_key:
            raise ConfigurationException("Gemini API key is required")

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 8192,
        **kwargs: Any,
    ) -> str:
        """Generate text using Gemini ``generateContent``."""
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
                **kwargs,
            },
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        result = await self._post_json(
            f"{self.base_url}/models/{self.model}:generateContent", payload
        )

        try:
            parts = result["candidates"][0]["content"]["parts"]
            return "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            # A blocked prompt comes back without candidates
            block_reason = (result.get("promptFeedback") or {}).get("blockReason")
            raise self._envelope_error(e, block_reason=block_reason)

    @property
    def health_url(self) -> str:
        return f"{self.base_url}/models/{self.model}"

    def request_headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    @property
    def provider_name(self) -> str:
        """Get provider name."""
        return "gemini"
