"""Data models for the resume customization pipeline."""

from resume_customizer.models.archive import ArchiveItem
from resume_customizer.models.customization import (
    CustomizationRequest,
    CustomizationResult,
    DisplayConfig,
    SectionToggles,
    TitleBar,
)
from resume_customizer.models.resume import (
    DEFAULT_EDITABLE_FIELDS,
    EditableFields,
    ResumeDocument,
    load_mother_resume,
    load_resume,
)

__all__ = [
    "ArchiveItem",
    "CustomizationRequest",
    "CustomizationResult",
    "DEFAULT_EDITABLE_FIELDS",
    "DisplayConfig",
    "EditableFields",
    "ResumeDocument",
    "SectionToggles",
    "TitleBar",
    "load_mother_resume",
    "load_resume",
]
