"""Base class for LLM providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from core.exceptions import LLMException

logger = logging.getLogger(__name__)

HEALTH_CHECK_TIMEOUT = 10


class BaseLLMProvider(ABC):
    """Base class for all LLM providers.

    Subclasses build the provider-specific request body and read the reply
    text out of the response envelope; the JSON-over-HTTP round trip and
    the mapping of transport failures to ``LLMException`` live here.
    """

    def __init__(self, config: dict[str, Any]) -> None:
        """
        Initialize LLM provider.

        Args:
            config: Provider-specific configuration.  ``timeout`` (seconds)
                and ``transport`` (an ``httpx.AsyncBaseTransport``, used by
                tests) are understood by every HTTP provider.
        """
        self.config = config
        self.timeout = config.get("timeout", 120)
        self.transport: httpx.AsyncBaseTransport | None = config.get("transport")

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 8192,
        **kwargs: Any,
    ) -> str:
        """
        Generate text from prompt.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt
            temperature: Sampling temperature (0.0-1.0)
            max_tokens: Maximum tokens to generate
            **kwargs: Additional provider-specific parameters

        Returns:
            Generated text

        Raises:
            LLMException: On transport errors, non-2xx responses or an
                unexpected response envelope
        """

    async def health_check(self) -> bool:
        """
        Check if the LLM provider is available.

        Returns:
            True if provider is healthy, False otherwise
        """
        url = self.health_url
        if url is None:
            return True
        try:
            async with self._client(HEALTH_CHECK_TIMEOUT) as client:
                response = await client.get(url, headers=self.request_headers())
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"{self.provider_name} health check failed: {e}")
            return False

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get provider name."""

    @property
    def health_url(self) -> str | None:
        """URL answering 200 when the provider is reachable; None skips the check."""
        return None

    def request_headers(self) -> dict[str, str]:
        """Headers sent with every request (authentication)."""
        return {}

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self.transport)

    async def _post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST *payload* and return the decoded JSON body.

        Raises:
            LLMException: On connection errors, timeouts, non-2xx status or
                a body that is not a JSON object
        """
        try:
            async with self._client(self.timeout) as client:
                response = await client.post(url, json=payload, headers=self.request_headers())
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"{self.provider_name} API error: {e}")
            raise LLMException(
                f"{self.provider_name} API request failed: {str(e)}",
                details={"provider": self.provider_name, "url": url},
            )
        except ValueError as e:
            raise LLMException(
                f"{self.provider_name} returned a non-JSON body",
                details={"provider": self.provider_name, "error": str(e)},
            )

        if not isinstance(result, dict):
            raise LLMException(
                f"{self.provider_name} returned an unexpected JSON body",
                details={"provider": self.provider_name},
            )
        return result

    def _envelope_error(self, error: Exception, **details: Any) -> LLMException:
        """Exception for a response whose envelope lacks the reply text."""
        return LLMException(
            f"Unexpected {self.provider_name} response format",
            details={"provider": self.provider_name, "error": str(error), **details},
        )
