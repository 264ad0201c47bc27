"""Pydantic models for customization requests and results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from resume_customizer.models.resume import ResumeDocument, WireModel


class TitleBar(WireModel):
    main: str = "Performance Marketing / Marketing Data Analysis / Technical Project Manager"
    sub: str = "Business Development | Digital Marketing Strategy | Performance Optimizations"


class SectionToggles(WireModel):
    show_technical_proficiency: bool = True
    show_core_competencies: bool = True
    show_professional_experience: bool = True
    show_education: bool = True
    show_certifications: bool = True


class DisplayConfig(WireModel):
    """Presentation settings stored alongside an archived resume."""

    title_bar: TitleBar = Field(default_factory=TitleBar)
    sections: SectionToggles = Field(default_factory=SectionToggles)


class CustomizationRequest(BaseModel):
    job_description: str
    base: ResumeDocument
    instructions: str | None = None  # free-text template, overrides style
    style: str = "general"


class CustomizationResult(BaseModel):
    resume: ResumeDocument
    reasoning: str
    config: DisplayConfig = Field(default_factory=DisplayConfig)
    company_or_role: str | None = None
    provider: str | None = None
    fallback_used: bool = False
    error_kind: str | None = None  # AI-path error that triggered the fallback
