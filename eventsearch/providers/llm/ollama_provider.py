"""Ollama LLM provider adapter.

Talks to a local Ollama server through its OpenAI-compatible ``/v1`` API
using the ``openai`` client.  Lets query expansion run offline with no API
cost; enabled with ``OLLAMA_ENABLED=true``.

Setup: install Ollama, ``ollama pull llama3.1``, then set
``OLLAMA_BASE_URL`` if the server is not on ``http://localhost:11434``.
"""

from __future__ import annotations

import openai
import structlog

from eventsearch.config.settings import Settings
from eventsearch.interfaces.llm_provider import ILLMProvider
from eventsearch.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


class OllamaLLMProvider(ILLMProvider):
    """LLM provider backed by a local Ollama server."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._base_url = settings.ollama_base_url
        # The openai SDK insists on a non-empty key; Ollama ignores it.
        self._client = openai.AsyncOpenAI(
            base_url=f"{self._base_url.rstrip('/')}/v1",
            api_key="ollama",
            max_retries=0,
        )
        self._text_model = settings.ollama_model

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.0,
        max_tokens: int = 300,
    ) -> str:
        """Generate a text completion via Ollama's OpenAI-compatible API."""
        try:
            response = await self._client.chat.completions.create(
                model=self._text_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            raise LLMError(
                message=f"Ollama API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if content is None:
            raise LLMError(
                message="Ollama returned empty response",
                provider_name=self.get_provider_name(),
            )
        logger.info("ollama_completion", model=self._text_model)
        return content

    def is_available(self) -> bool:
        """Return ``True`` if Ollama is enabled and a base URL is configured."""
        return self._settings.ollama_enabled and bool(self._base_url)

    def get_provider_name(self) -> str:
        return "ollama"
