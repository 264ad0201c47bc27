"""Run logging: model and SQLite store."""

from resume_customizer.logging.models import RunLog
from resume_customizer.logging.run_store import RunStore

__all__ = ["RunLog", "RunStore"]
