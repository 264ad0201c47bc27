"""Pydantic models for the resume document.

The wire format is the camelCase JSON of the mother resume, including its
legacy ``_dynamic`` markers. The markers are kept as ordinary data so a
round trip is lossless; which paths the AI may rewrite is decided by an
``EditableFields`` descriptor, not by the document itself.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MOTHER_RESUME_PATH = Path(__file__).resolve().parent.parent / "data" / "mother_resume.json"

SKILL_CATEGORIES = (
    "programming",
    "cloudData",
    "analytics",
    "mlAi",
    "productivity",
    "marketingAds",
)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TextSection(WireModel):
    dynamic: bool = Field(False, alias="_dynamic")
    value: str = ""


class ListSection(WireModel):
    dynamic: bool = Field(False, alias="_dynamic")
    value: list[str] = Field(default_factory=list)


class Header(WireModel):
    dynamic: bool = Field(False, alias="_dynamic")
    name: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""


class TechnicalProficiency(WireModel):
    dynamic: bool = Field(False, alias="_dynamic")
    programming: list[str] = Field(default_factory=list)
    cloud_data: list[str] = Field(default_factory=list)
    analytics: list[str] = Field(default_factory=list)
    ml_ai: list[str] = Field(default_factory=list)
    productivity: list[str] = Field(default_factory=list)
    marketing_ads: list[str] = Field(default_factory=list)


class ExperienceEntry(WireModel):
    company: str = ""
    dynamic_company: bool = Field(False, alias="_dynamic_company")
    title: str = ""
    dynamic_title: bool = Field(False, alias="_dynamic_title")
    date_range: str = ""
    dynamic_date_range: bool = Field(False, alias="_dynamic_dateRange")
    description: TextSection = Field(default_factory=TextSection)


class EducationEntry(WireModel):
    school: str = ""
    date_range: str = ""
    degree: str = ""


class EducationSection(WireModel):
    dynamic: bool = Field(False, alias="_dynamic")
    value: list[EducationEntry] = Field(default_factory=list)


class ResumeDocument(WireModel):
    header: Header
    summary: TextSection
    core_competencies: ListSection
    technical_proficiency: TechnicalProficiency = Field(default_factory=TechnicalProficiency)
    professional_experience: list[ExperienceEntry] = Field(default_factory=list)
    education: EducationSection = Field(default_factory=EducationSection)
    certifications: ListSection = Field(default_factory=ListSection)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase wire format, markers included."""
        return self.model_dump(by_alias=True)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_wire(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> ResumeDocument:
        return cls.model_validate(data)


@dataclass(frozen=True)
class EditableFields:
    """Field paths the AI pipeline may rewrite.

    Paths are wire-format keys joined by dots, with experience entries
    addressed by index: ``summary``, ``coreCompetencies``,
    ``professionalExperience.2.description``. Patterns use fnmatch syntax.
    """

    patterns: frozenset[str]

    def allows(self, path: str) -> bool:
        return any(fnmatchcase(path, pattern) for pattern in self.patterns)

    def covers(self, path: str) -> bool:
        """True when ``path`` or any of its parents is allowed."""
        parts = path.split(".")
        return any(self.allows(".".join(parts[:i])) for i in range(1, len(parts) + 1))

    def intersect(self, other: EditableFields) -> EditableFields:
        """Descriptor for the paths editable under both ``self`` and ``other``."""
        patterns = {p for p in self.patterns if other.covers(p)}
        patterns |= {p for p in other.patterns if self.covers(p)}
        return EditableFields(frozenset(patterns))

    @classmethod
    def from_markers(cls, document: ResumeDocument) -> EditableFields:
        """Build a descriptor from a legacy document's ``_dynamic`` markers."""
        patterns: set[str] = set()
        sections = {
            "header": document.header,
            "summary": document.summary,
            "coreCompetencies": document.core_competencies,
            "technicalProficiency": document.technical_proficiency,
            "education": document.education,
            "certifications": document.certifications,
        }
        for key, section in sections.items():
            if section.dynamic:
                patterns.add(key)

        for i, entry in enumerate(document.professional_experience):
            prefix = f"professionalExperience.{i}"
            if entry.dynamic_company:
                patterns.add(f"{prefix}.company")
            if entry.dynamic_title:
                patterns.add(f"{prefix}.title")
            if entry.dynamic_date_range:
                patterns.add(f"{prefix}.dateRange")
            if entry.description.dynamic:
                patterns.add(f"{prefix}.description")
        return cls(frozenset(patterns))


DEFAULT_EDITABLE_FIELDS = EditableFields(
    frozenset({
        "summary",
        "coreCompetencies",
        "technicalProficiency",
        "professionalExperience.*.description",
    })
)


def load_resume(path: str | Path) -> ResumeDocument:
    """Load a resume document from a wire-format JSON file."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Resume not found: {p}")
    return ResumeDocument.from_wire(json.loads(p.read_text(encoding="utf-8")))


def load_mother_resume() -> ResumeDocument:
    """Load the bundled mother resume."""
    return load_resume(MOTHER_RESUME_PATH)
