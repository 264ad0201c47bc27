"""Run log data model."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class RunLog(BaseModel):
    """Outcome of a single customization run."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=datetime.now)
    provider: str | None = None
    style: str | None = None
    success: bool = True
    fallback_used: bool = False
    error_kind: str | None = None  # "transport" | "parse" | "structure" | "budget" | ...
    error_message: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    elapsed_seconds: float = 0.0
    company_or_role: str | None = None
