"""Ollama backend over plain HTTP (single-prompt style)."""

from __future__ import annotations

import httpx

from resume_customizer.clients.llm_client import SYSTEM_PROMPT, LLMProvider, LLMResponse
from resume_customizer.config import DEFAULT_OLLAMA_BASE_URL
from resume_customizer.errors import TransportError


class OllamaProvider(LLMProvider):
    """Local Ollama server. Needs no credential."""

    name = "Ollama"

    def __init__(
        self,
        base_url: str | None = None,
        model: str = "llama3.1:8b",
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs,
    ):
        super().__init__(model, **kwargs)
        self.base_url = (base_url or DEFAULT_OLLAMA_BASE_URL).rstrip("/")
        self._transport = transport

    async def _complete(self, prompt: str) -> LLMResponse:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "system": SYSTEM_PROMPT,
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                r = await client.post("/api/generate", json=payload)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                self.name,
                f"{exc.response.status_code} - {exc.response.text[:200]}",
                status_code=exc.response.status_code,
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise TransportError(self.name, str(exc)) from exc

        if not isinstance(data, dict):
            raise TransportError(self.name, f"unexpected response body: {type(data).__name__}")
        return LLMResponse(
            text=data.get("response", ""),
            input_tokens=data.get("prompt_eval_count", 0),
            output_tokens=data.get("eval_count", 0),
        )
