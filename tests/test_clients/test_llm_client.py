"""Tests for the provider factory and the Anthropic backend."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from resume_customizer.clients.llm_client import (
    SYSTEM_PROMPT,
    AnthropicProvider,
    LLMResponse,
    create_provider,
)
from resume_customizer.clients.ollama_client import OllamaProvider
from resume_customizer.clients.openai_client import OpenAIProvider
from resume_customizer.config import ProviderSettings
from resume_customizer.errors import ConfigurationError, ProviderAuthError, TransportError

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    message = MagicMock()
    message.content = [MagicMock(type="text", text=text)]
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    return message


@pytest.fixture
def provider():
    p = AnthropicProvider(api_key="test-key", temperature=0.2, max_tokens=1000)
    p.client = MagicMock()
    p.client.messages.create = AsyncMock()
    return p


class TestCreateProvider:
    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unsupported AI provider: mistral"):
            create_provider(ProviderSettings(provider="mistral", model="x", api_key="k"))

    @pytest.mark.parametrize(
        "name, label",
        [("openai", "OpenAI"), ("anthropic", "Anthropic"), ("google", "Google AI")],
    )
    def test_missing_key(self, name, label):
        with pytest.raises(ConfigurationError, match=f"{label} API key is required") as exc_info:
            create_provider(ProviderSettings(provider=name, model="m"))
        assert exc_info.value.provider == name

    def test_ollama_without_key(self):
        p = create_provider(
            ProviderSettings(provider="ollama", model="llama3.1:8b", base_url="http://gpu:11434/")
        )
        assert isinstance(p, OllamaProvider)
        assert p.base_url == "http://gpu:11434"

    def test_settings_passed_through(self):
        p = create_provider(
            ProviderSettings(
                provider="openai", model="gpt-4o", api_key="sk-test",
                timeout=30, temperature=0.1, max_tokens=2000,
            )
        )
        assert isinstance(p, OpenAIProvider)
        assert (p.model, p.timeout, p.temperature, p.max_tokens) == ("gpt-4o", 30, 0.1, 2000)

    def test_anthropic(self):
        p = create_provider(ProviderSettings(provider="anthropic", model="claude-x", api_key="k"))
        assert isinstance(p, AnthropicProvider)
        assert p.name == "Anthropic"


class TestAnthropicProvider:
    async def test_generate_returns_llm_response(self, provider):
        provider.client.messages.create.return_value = _message('{"ok": true}')

        result = await provider.generate("Tailor this resume")

        assert isinstance(result, LLMResponse)
        assert result.text == '{"ok": true}'
        assert result.input_tokens == 100
        assert result.output_tokens == 50

    async def test_request_shape(self, provider):
        provider.client.messages.create.return_value = _message("{}")

        await provider.generate("Tailor this resume")

        kwargs = provider.client.messages.create.call_args.kwargs
        assert kwargs["system"] == SYSTEM_PROMPT
        assert kwargs["messages"] == [{"role": "user", "content": "Tailor this resume"}]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 1000

    async def test_empty_content(self, provider):
        message = _message("")
        message.content = []
        provider.client.messages.create.return_value = message
        assert (await provider.generate("x")).text == ""

    async def test_first_text_block_used(self, provider):
        message = _message("{}")
        message.content = [
            MagicMock(type="thinking", text=None),
            MagicMock(type="text", text='{"ok": 1}'),
        ]
        provider.client.messages.create.return_value = message
        assert (await provider.generate("x")).text == '{"ok": 1}'

    async def test_no_text_block(self, provider):
        message = _message("{}")
        message.content = [MagicMock(type="tool_use")]
        provider.client.messages.create.return_value = message
        assert (await provider.generate("x")).text == ""

    async def test_connection_error(self, provider):
        provider.client.messages.create.side_effect = anthropic.APIConnectionError(request=_REQUEST)
        with pytest.raises(TransportError) as exc_info:
            await provider.generate("x")
        assert exc_info.value.kind == "transport"
        assert exc_info.value.status_code is None

    async def test_authentication_error(self, provider):
        provider.client.messages.create.side_effect = anthropic.AuthenticationError(
            "invalid x-api-key", response=httpx.Response(401, request=_REQUEST), body=None
        )
        with pytest.raises(ProviderAuthError) as exc_info:
            await provider.generate("x")
        assert exc_info.value.status_code == 401
        assert exc_info.value.kind == "authentication"

    async def test_status_error(self, provider):
        provider.client.messages.create.side_effect = anthropic.InternalServerError(
            "overloaded", response=httpx.Response(529, request=_REQUEST), body=None
        )
        with pytest.raises(TransportError) as exc_info:
            await provider.generate("x")
        assert exc_info.value.status_code == 529
        assert not isinstance(exc_info.value, ProviderAuthError)
