"""Pydantic model for archived resume variants."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from resume_customizer.models.customization import DisplayConfig
from resume_customizer.models.resume import ResumeDocument


class ArchiveItem(BaseModel):
    id: int
    label: str
    data: ResumeDocument
    config: DisplayConfig = Field(default_factory=DisplayConfig)
    is_current: bool = False
    date: datetime = Field(default_factory=datetime.now)
