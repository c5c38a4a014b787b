"""
Completion client for the upstream language-model provider.

Wraps LiteLLM so the rest of the service deals only in chat messages and
the raw assistant text. Handlers receive the client through FastAPI
dependency injection, which lets tests substitute a fake.
"""

import logging
from functools import lru_cache
from typing import Any

from litellm import acompletion

from config import get_settings
from errors import UpstreamCallError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Thin async client around litellm.acompletion."""

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 500,
        timeout: float | None = None,
    ):
        self.model = model
        self.api_key = api_key
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        """
        Send chat messages and return the assistant's text.

        Args:
            messages: OpenAI-style chat messages
            model: Override for the configured model
            response_format: Optional provider response_format hint

        Returns:
            Assistant message content ("" if the provider sent none)

        Raises:
            UpstreamCallError: If the provider call fails
        """
        model = model or self.model
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.timeout:
            kwargs["timeout"] = self.timeout
        if response_format:
            kwargs["response_format"] = response_format

        logger.info(f"Calling completion model {model}")
        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"Completion call to {model} failed: {e}")
            raise UpstreamCallError(str(e), details=str(e)) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise UpstreamCallError(
                f"Malformed completion response: {e}", details=str(e)
            ) from e

        content = content or ""
        logger.debug(f"Raw completion response: {content[:500]}")
        return content


@lru_cache
def get_completion_client() -> CompletionClient:
    """Get or create the completion client used by request handlers."""
    settings = get_settings()
    return CompletionClient(
        model=settings.appeal_model,
        api_key=settings.openai_api_key,
        temperature=settings.completion_temperature,
        max_tokens=settings.completion_max_tokens,
        timeout=settings.upstream_timeout_seconds,
    )
