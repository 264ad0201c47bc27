"""OpenAI backend (chat-completion style)."""

from __future__ import annotations

import openai

from resume_customizer.clients.llm_client import SYSTEM_PROMPT, LLMProvider, LLMResponse
from resume_customizer.errors import ProviderAuthError, TransportError


class OpenAIProvider(LLMProvider):
    name = "OpenAI"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", **kwargs):
        super().__init__(model, **kwargs)
        self.client = openai.AsyncOpenAI(api_key=api_key, timeout=self.timeout)

    async def _complete(self, prompt: str) -> LLMResponse:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.AuthenticationError as exc:
            raise ProviderAuthError(self.name, str(exc), status_code=exc.status_code) from exc
        except openai.APIStatusError as exc:
            raise TransportError(self.name, str(exc), status_code=exc.status_code) from exc
        except openai.APIConnectionError as exc:
            raise TransportError(self.name, str(exc)) from exc

        text = completion.choices[0].message.content if completion.choices else None
        usage = completion.usage
        return LLMResponse(
            text=text or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )
