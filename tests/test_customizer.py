"""Tests for ResumeCustomizer: AI path, fallback and run logging."""

from __future__ import annotations

import pytest

from conftest import FakeProvider
from resume_customizer.config import AppConfig, LLMConfig
from resume_customizer.errors import (
    ConfigurationError,
    ProviderAuthError,
    TransportError,
    ValidationError,
)
from resume_customizer.logging import RunStore
from resume_customizer.models.customization import CustomizationRequest
from resume_customizer.models.resume import ResumeDocument
from resume_customizer.pipeline.customizer import ResumeCustomizer, create_customizer
from resume_customizer.pipeline.fallback import display_config_for


def _request(base, jd, **kwargs) -> CustomizationRequest:
    return CustomizationRequest(job_description=jd, base=base, **kwargs)


class TestAIPath:
    async def test_successful_customization(self, mother_resume, wire, completion_for, sample_jd_text):
        wire["summary"]["value"] = "Data analyst with SQL and team leadership experience."
        provider = FakeProvider(completion_for(wire))
        customizer = ResumeCustomizer(provider)

        result = await customizer.customize(_request(mother_resume, sample_jd_text))

        assert not result.fallback_used
        assert result.error_kind is None
        assert result.resume.summary.value == "Data analyst with SQL and team leadership experience."
        assert result.resume.header == mother_resume.header
        assert result.reasoning == "Resume customized using Fake based on job requirements"
        assert result.provider == "Fake"
        assert result.company_or_role == "Northwind Travel"
        assert result.config == display_config_for(sample_jd_text)

    async def test_prose_wrapped_json_accepted(self, mother_resume, wire, completion_for):
        provider = FakeProvider(completion_for(wire, prose=True))
        result = await ResumeCustomizer(provider).customize(_request(mother_resume, "Any role"))
        assert not result.fallback_used

    async def test_style_text_in_prompt(self, mother_resume, wire, completion_for):
        provider = FakeProvider(completion_for(wire))
        await ResumeCustomizer(provider).customize(
            _request(mother_resume, "Sales lead", style="sales")
        )
        assert "SALES ROLE OPTIMIZATION" in provider.prompts[0]

    async def test_custom_instructions_override_style(self, mother_resume, wire, completion_for):
        provider = FakeProvider(completion_for(wire))
        await ResumeCustomizer(provider).customize(
            _request(mother_resume, "Sales lead", style="sales", instructions="Only reorder skills.")
        )
        assert "Only reorder skills." in provider.prompts[0]
        assert "SALES ROLE OPTIMIZATION" not in provider.prompts[0]

    async def test_instructions_matching_a_style_id_used_verbatim(self, mother_resume, wire, completion_for):
        provider = FakeProvider(completion_for(wire))
        await ResumeCustomizer(provider).customize(
            _request(mother_resume, "Sales lead", instructions="sales")
        )
        assert "SALES ROLE OPTIMIZATION" not in provider.prompts[0]

    async def test_unmarked_sections_never_rewritten(self, completion_for):
        base = ResumeDocument.from_wire({
            "header": {"name": "Test"},
            "summary": {"_dynamic": False, "value": "one two three four"},
            "coreCompetencies": {"_dynamic": True, "value": ["SQL"]},
        })
        generated = base.to_wire()
        generated["summary"]["value"] = "changed text here"
        provider = FakeProvider(completion_for(generated))

        result = await ResumeCustomizer(provider).customize(_request(base, "We need SQL."))

        assert not result.fallback_used
        assert result.resume.summary.value == "one two three four"
        assert "EDITABLE FIELDS: coreCompetencies\n" in provider.prompts[0]

    async def test_unknown_style_propagates(self, mother_resume):
        provider = FakeProvider("{}")
        with pytest.raises(ValidationError):
            await ResumeCustomizer(provider).customize(
                _request(mother_resume, "Any role", style="poetry")
            )
        assert provider.prompts == []

    async def test_configuration_error_propagates(self, mother_resume):
        provider = FakeProvider(ConfigurationError("OpenAI API key is required", provider="openai"))
        with pytest.raises(ConfigurationError):
            await ResumeCustomizer(provider).customize(_request(mother_resume, "Any role"))


class TestFallback:
    async def test_over_budget_summary_uses_fallback(self, completion_for):
        summary = " ".join(f"word{i}" for i in range(50))
        base = ResumeDocument.from_wire({
            "header": {"name": "Test"},
            "summary": {"_dynamic": True, "value": summary},
            "coreCompetencies": {"_dynamic": True, "value": ["Excel", "SQL Reporting"]},
        })
        generated = base.to_wire()
        generated["summary"]["value"] = " ".join(f"new{i}" for i in range(60))
        provider = FakeProvider(completion_for(generated))

        result = await ResumeCustomizer(provider).customize(_request(base, "We need SQL."))

        assert result.fallback_used
        assert result.error_kind == "budget"
        assert result.resume.summary.value == summary
        assert result.resume.core_competencies.value == ["SQL Reporting", "Excel"]
        assert "summary has 60 words, limit is 50" in result.reasoning

    @pytest.mark.parametrize(
        "outcome, kind",
        [
            (TransportError("Fake", "connection refused"), "transport"),
            (ProviderAuthError("Fake", "invalid key", status_code=401), "authentication"),
            ("Sorry, I cannot help with that.", "parse"),
            ('{"summary": {"value": "x"}}', "structure"),
        ],
    )
    async def test_ai_errors_use_fallback(self, mother_resume, outcome, kind):
        result = await ResumeCustomizer(FakeProvider(outcome)).customize(
            _request(mother_resume, "Analyst with SQL")
        )
        assert result.fallback_used
        assert result.error_kind == kind
        assert result.provider == "Fake"
        assert result.resume.header == mother_resume.header

    async def test_retry_recovers(self, mother_resume, wire, completion_for):
        provider = FakeProvider("not json", completion_for(wire))
        customizer = ResumeCustomizer(provider, max_attempts=2)

        result = await customizer.customize(_request(mother_resume, "Analyst"))

        assert not result.fallback_used
        assert len(provider.prompts) == 2

    async def test_single_attempt_by_default(self, mother_resume, wire, completion_for):
        provider = FakeProvider("not json", completion_for(wire))
        result = await ResumeCustomizer(provider).customize(_request(mother_resume, "Analyst"))
        assert result.fallback_used
        assert len(provider.prompts) == 1


class TestRunLogging:
    async def test_success_recorded(self, tmp_path, mother_resume, wire, completion_for, sample_jd_text):
        store = RunStore(tmp_path / "runs.db")
        customizer = ResumeCustomizer(FakeProvider(completion_for(wire)), run_store=store)

        await customizer.customize(_request(mother_resume, sample_jd_text, style="technical"))

        [log] = store.get_logs()
        assert log.provider == "Fake"
        assert log.style == "technical"
        assert log.success
        assert not log.fallback_used
        assert log.input_tokens == 120
        assert log.output_tokens == 80
        assert log.company_or_role == "Northwind Travel"

    async def test_fallback_recorded(self, tmp_path, mother_resume):
        store = RunStore(tmp_path / "runs.db")
        customizer = ResumeCustomizer(
            FakeProvider(TransportError("Fake", "boom")), run_store=store
        )

        await customizer.customize(_request(mother_resume, "Analyst", instructions="Be brief."))

        [log] = store.get_logs()
        assert log.fallback_used
        assert log.error_kind == "transport"
        assert log.style == "custom"
        assert "boom" in log.error_message


class TestCreateCustomizer:
    def test_missing_key_raises(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.delenv("AI_PROVIDER", raising=False)
        with pytest.raises(ConfigurationError, match="OpenAI API key is required"):
            create_customizer(AppConfig())

    def test_ollama_needs_no_key(self, monkeypatch):
        monkeypatch.delenv("AI_PROVIDER", raising=False)
        config = AppConfig(llm=LLMConfig(provider="ollama", max_attempts=3))
        customizer = create_customizer(config)
        assert customizer.provider.name == "Ollama"
        assert customizer.max_attempts == 3
