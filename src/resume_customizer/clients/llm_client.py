"""LLM provider interface, the Anthropic backend and the provider factory."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import anthropic

from resume_customizer.config import ProviderSettings
from resume_customizer.errors import (
    ConfigurationError,
    ProviderAuthError,
    TransportError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional resume writer and career coach. Your task is to "
    "analyze job descriptions and customize resume content to match job "
    "requirements while maintaining accuracy and professionalism. Always return "
    "valid JSON in the exact format requested."
)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0


class LLMProvider(ABC):
    """One LLM backend: accepts a text prompt, returns a text completion.

    Subclasses translate their transport's failures into ``TransportError``
    (or ``ProviderAuthError``) and never retry.
    """

    name = "LLM"

    def __init__(
        self,
        model: str,
        *,
        timeout: float = 60,
        temperature: float = 0.7,
        max_tokens: int = 4000,
    ):
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, prompt: str) -> LLMResponse:
        """Send a prompt and return the completion text with usage."""
        logger.debug("LLM call: provider=%s model=%s", self.name, self.model)
        try:
            response = await self._complete(prompt)
        except TransportError:
            logger.error("LLM call failed: provider=%s", self.name, exc_info=True)
            raise
        logger.debug(
            "LLM response: %d input, %d output tokens",
            response.input_tokens,
            response.output_tokens,
        )
        return response

    @abstractmethod
    async def _complete(self, prompt: str) -> LLMResponse:
        """Perform the backend-specific request."""


class AnthropicProvider(LLMProvider):
    """Async Claude API client (single-message style)."""

    name = "Anthropic"

    def __init__(self, api_key: str, model: str = "claude-3-haiku-20240307", **kwargs):
        super().__init__(model, **kwargs)
        self.client = anthropic.AsyncAnthropic(api_key=api_key, timeout=self.timeout)

    async def _complete(self, prompt: str) -> LLMResponse:
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AuthenticationError as exc:
            raise ProviderAuthError(self.name, str(exc), status_code=exc.status_code) from exc
        except anthropic.APIStatusError as exc:
            raise TransportError(self.name, str(exc), status_code=exc.status_code) from exc
        except anthropic.APIConnectionError as exc:
            raise TransportError(self.name, str(exc)) from exc

        text = next((block.text for block in message.content if block.type == "text"), "")
        return LLMResponse(
            text=text,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )


def create_provider(settings: ProviderSettings) -> LLMProvider:
    """Build the provider named by ``settings``.

    Raises ConfigurationError for unknown providers and missing credentials.
    """
    options = {
        "timeout": settings.timeout,
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }
    provider = settings.provider

    if provider == "ollama":
        from resume_customizer.clients.ollama_client import OllamaProvider

        return OllamaProvider(base_url=settings.base_url, model=settings.model, **options)

    if provider == "openai":
        from resume_customizer.clients.openai_client import OpenAIProvider as cls
    elif provider == "anthropic":
        cls = AnthropicProvider
    elif provider == "google":
        from resume_customizer.clients.google_client import GoogleAIProvider as cls
    else:
        raise ConfigurationError(f"Unsupported AI provider: {provider}", provider=provider)

    if not settings.api_key:
        raise ConfigurationError(f"{cls.name} API key is required", provider=provider)
    return cls(api_key=settings.api_key, model=settings.model, **options)
