"""Shared test fixtures."""

from __future__ import annotations

import json

import pytest

from resume_customizer.clients.llm_client import LLMProvider, LLMResponse
from resume_customizer.models.resume import ResumeDocument, load_mother_resume


class FakeProvider(LLMProvider):
    """Provider returning queued completions (or raising queued errors)."""

    name = "Fake"

    def __init__(self, *outcomes: str | Exception):
        super().__init__("fake-model")
        self.outcomes = list(outcomes)
        self.prompts: list[str] = []

    async def _complete(self, prompt: str) -> LLMResponse:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(text=outcome, input_tokens=120, output_tokens=80)


@pytest.fixture
def mother_resume() -> ResumeDocument:
    return load_mother_resume()


@pytest.fixture
def sample_jd_text() -> str:
    return """Senior Data Analyst at Northwind Travel

We are looking for an analyst with strong SQL skills and proven leadership
to own reporting for our growth team. You will build dashboards, partner
with product managers and mentor two junior analysts.

Requirements:
- 5+ years of SQL
- Leadership of small analytics teams
- Experience with Tableau or Looker
"""


@pytest.fixture
def wire(mother_resume) -> dict:
    """Mutable wire-format copy of the mother resume."""
    return mother_resume.to_wire()


@pytest.fixture
def completion_for():
    """Serialize a wire dict the way a chatty model would return it."""

    def _build(data: dict, prose: bool = False) -> str:
        body = json.dumps(data, indent=2)
        if prose:
            return f"Sure! Here is the optimized resume:\n\n{body}\n\nLet me know if you need changes."
        return body

    return _build
