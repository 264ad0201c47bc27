"""Tests for configuration loading and validation."""

from __future__ import annotations

import pytest

from resume_customizer.config import (
    DEFAULT_MODELS,
    DEFAULT_OLLAMA_BASE_URL,
    AppConfig,
    ExportConfig,
    LLMConfig,
    PipelineConfig,
    ProviderSettings,
    StorageConfig,
    load_config,
)


class TestDefaults:
    def test_app_config_defaults(self):
        config = AppConfig()
        assert config.llm.provider == "openai"
        assert config.llm.max_attempts == 1
        assert config.pipeline.word_multiplier == 1.0
        assert config.pipeline.default_style == "general"
        assert config.export.theme == "professional"
        assert config.export.strategy == "layout"

    def test_db_path_expands_home(self):
        assert "~" not in str(StorageConfig().resolved_db_path)


class TestValidation:
    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="provider"):
            LLMConfig(provider="mistral")

    @pytest.mark.parametrize(
        "kwargs, field",
        [
            ({"timeout": 0}, "timeout"),
            ({"max_attempts": 6}, "max_attempts"),
            ({"temperature": 2.5}, "temperature"),
            ({"max_tokens": 0}, "max_tokens"),
        ],
    )
    def test_llm_ranges(self, kwargs, field):
        with pytest.raises(ValueError, match=field):
            LLMConfig(**kwargs)

    def test_multiplier_below_one(self):
        with pytest.raises(ValueError, match="word_multiplier"):
            PipelineConfig(word_multiplier=0.8)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="strategy"):
            ExportConfig(strategy="latex")


class TestLoadConfig:
    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "llm:\n  provider: anthropic\n  max_attempts: 3\n"
            "pipeline:\n  word_multiplier: 1.2\n"
            "export:\n  theme: modern\n"
        )

        config = load_config(path)

        assert config.llm.provider == "anthropic"
        assert config.llm.max_attempts == 3
        assert config.llm.timeout == 60
        assert config.pipeline.word_multiplier == 1.2
        assert config.export.theme == "modern"

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == AppConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == AppConfig()

    def test_invalid_value_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("llm:\n  temperature: 9\n")
        with pytest.raises(ValueError, match="temperature"):
            load_config(path)


class TestProviderSettings:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for var in (
            "AI_PROVIDER", "OPENAI_API_KEY", "OPENAI_MODEL", "ANTHROPIC_API_KEY",
            "GOOGLE_AI_API_KEY", "OLLAMA_BASE_URL", "OLLAMA_MODEL",
        ):
            monkeypatch.delenv(var, raising=False)

    def test_config_provider(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        settings = ProviderSettings.from_env(LLMConfig(provider="anthropic", timeout=30))
        assert settings.provider == "anthropic"
        assert settings.api_key == "sk-ant"
        assert settings.model == DEFAULT_MODELS["anthropic"]
        assert settings.timeout == 30

    def test_env_provider_overrides_config(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "google")
        monkeypatch.setenv("GOOGLE_AI_API_KEY", "g-key")
        settings = ProviderSettings.from_env(LLMConfig(provider="openai"))
        assert settings.provider == "google"
        assert settings.api_key == "g-key"

    def test_explicit_provider_wins(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "google")
        settings = ProviderSettings.from_env(provider="openai")
        assert settings.provider == "openai"
        assert settings.api_key is None

    def test_model_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
        assert ProviderSettings.from_env().model == "gpt-4o"

    def test_ollama_base_url(self, monkeypatch):
        settings = ProviderSettings.from_env(provider="ollama")
        assert settings.base_url == DEFAULT_OLLAMA_BASE_URL
        monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434")
        assert ProviderSettings.from_env(provider="ollama").base_url == "http://gpu-box:11434"
