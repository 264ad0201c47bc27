"""FastAPI dependency providers."""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

from resume_customizer.config import AppConfig, load_config
from resume_customizer.logging import RunStore
from resume_customizer.pipeline.customizer import ResumeCustomizer, create_customizer


@lru_cache()
def get_config() -> AppConfig:
    """Cached config singleton."""
    return load_config()


@lru_cache()
def get_run_store() -> RunStore:
    return RunStore(get_config().storage.resolved_db_path)


def get_customizer_factory() -> Callable[[], ResumeCustomizer]:
    """Deferred customizer construction.

    Routes validate the request body before building the provider, so a
    bad request never needs credentials.
    """
    return lambda: create_customizer(get_config(), run_store=get_run_store())
