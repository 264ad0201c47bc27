"""Application configuration loaded from config.yaml and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

PROVIDERS = ("openai", "anthropic", "google", "ollama")

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-haiku-20240307",
    "google": "gemini-1.5-flash",
    "ollama": "llama3.1:8b",
}

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    provider: str = "openai"
    timeout: int = 60
    max_attempts: int = 1
    temperature: float = 0.7
    max_tokens: int = 4000

    def __post_init__(self) -> None:
        if self.provider not in PROVIDERS:
            raise ValueError(f"provider must be one of {PROVIDERS}, got {self.provider!r}")
        _check_range("timeout", self.timeout, 1, 600)
        _check_range("max_attempts", self.max_attempts, 1, 5)
        _check_range("temperature", self.temperature, 0.0, 2.0)
        _check_range("max_tokens", self.max_tokens, 1, 32000)


@dataclass(frozen=True)
class PipelineConfig:
    word_multiplier: float = 1.0
    default_style: str = "general"

    def __post_init__(self) -> None:
        _check_range("word_multiplier", self.word_multiplier, 1.0, 3.0)


@dataclass(frozen=True)
class ExportConfig:
    theme: str = "professional"
    strategy: str = "layout"

    def __post_init__(self) -> None:
        if self.strategy not in ("layout", "browser"):
            raise ValueError(f"strategy must be 'layout' or 'browser', got {self.strategy!r}")


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.resume-customizer/resume.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


@dataclass(frozen=True)
class ProviderSettings:
    """Provider identity and credentials, resolved from the environment."""

    provider: str
    model: str
    api_key: str | None = None
    base_url: str | None = None
    timeout: float = 60
    temperature: float = 0.7
    max_tokens: int = 4000

    @classmethod
    def from_env(
        cls, llm: LLMConfig | None = None, provider: str | None = None
    ) -> ProviderSettings:
        """Build settings for the configured provider.

        An explicit ``provider`` wins over ``AI_PROVIDER``, which wins over
        ``llm.provider``. A missing credential is not an error here; the
        provider factory reports it.
        """
        llm = llm or LLMConfig()
        provider = provider or os.environ.get("AI_PROVIDER") or llm.provider
        env_keys = {
            "openai": ("OPENAI_API_KEY", "OPENAI_MODEL"),
            "anthropic": ("ANTHROPIC_API_KEY", "ANTHROPIC_MODEL"),
            "google": ("GOOGLE_AI_API_KEY", "GOOGLE_AI_MODEL"),
            "ollama": (None, "OLLAMA_MODEL"),
        }
        key_var, model_var = env_keys.get(provider, (None, None))
        return cls(
            provider=provider,
            model=(os.environ.get(model_var) if model_var else None)
            or DEFAULT_MODELS.get(provider, ""),
            api_key=os.environ.get(key_var) if key_var else None,
            base_url=(os.environ.get("OLLAMA_BASE_URL") or DEFAULT_OLLAMA_BASE_URL)
            if provider == "ollama"
            else None,
            timeout=llm.timeout,
            temperature=llm.temperature,
            max_tokens=llm.max_tokens,
        )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        export=ExportConfig(**raw.get("export", {})),
        storage=StorageConfig(**raw.get("storage", {})),
    )
