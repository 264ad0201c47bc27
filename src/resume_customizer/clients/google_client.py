"""Google Gemini backend (content-generation style)."""

from __future__ import annotations

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from resume_customizer.clients.llm_client import SYSTEM_PROMPT, LLMProvider, LLMResponse
from resume_customizer.errors import ProviderAuthError, TransportError

_AUTH_STATUSES = {401, 403}


class GoogleAIProvider(LLMProvider):
    name = "Google AI"

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash", **kwargs):
        super().__init__(model, **kwargs)
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
        )

    async def _complete(self, prompt: str) -> LLMResponse:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_PROMPT,
                    temperature=self.temperature,
                    max_output_tokens=self.max_tokens,
                ),
            )
        except genai_errors.APIError as exc:
            if exc.code in _AUTH_STATUSES:
                raise ProviderAuthError(self.name, str(exc), status_code=exc.code) from exc
            raise TransportError(self.name, str(exc), status_code=exc.code) from exc
        except httpx.HTTPError as exc:
            raise TransportError(self.name, str(exc)) from exc

        usage = response.usage_metadata
        return LLMResponse(
            text=response.text or "",
            input_tokens=(usage.prompt_token_count or 0) if usage else 0,
            output_tokens=(usage.candidates_token_count or 0) if usage else 0,
        )
