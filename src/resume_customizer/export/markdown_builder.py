"""Resume document to Markdown, respecting the display config."""

from __future__ import annotations

from resume_customizer.models.customization import DisplayConfig
from resume_customizer.models.resume import ResumeDocument

SKILL_LABELS = {
    "programming": "Programming",
    "cloud_data": "Cloud & Data",
    "analytics": "Analytics",
    "ml_ai": "ML / AI",
    "productivity": "Productivity",
    "marketing_ads": "Marketing & Ads",
}


def to_markdown(document: ResumeDocument, config: DisplayConfig | None = None) -> str:
    config = config or DisplayConfig()
    sections = config.sections
    header = document.header
    out: list[str] = [f"# {header.name}"]

    if config.title_bar.main:
        out.append(f"**{config.title_bar.main}**")
    if config.title_bar.sub:
        out.append(f"*{config.title_bar.sub}*")
    contact = " | ".join(p for p in (header.address, header.email, header.phone) if p)
    if contact:
        out.append(contact)

    if document.summary.value:
        out += ["", "## Professional Summary", "", document.summary.value]

    if sections.show_core_competencies and document.core_competencies.value:
        out += ["", "## Core Competencies", ""]
        out += [f"- {c}" for c in document.core_competencies.value]

    if sections.show_technical_proficiency:
        rows = [
            f"- **{label}:** {', '.join(getattr(document.technical_proficiency, attr))}"
            for attr, label in SKILL_LABELS.items()
            if getattr(document.technical_proficiency, attr)
        ]
        if rows:
            out += ["", "## Technical Proficiency", ""] + rows

    if sections.show_professional_experience and document.professional_experience:
        out += ["", "## Professional Experience"]
        for entry in document.professional_experience:
            out += ["", f"### {entry.title}, {entry.company}", f"*{entry.date_range}*"]
            if entry.description.value:
                out += ["", entry.description.value]

    if sections.show_education and document.education.value:
        out += ["", "## Education"]
        for edu in document.education.value:
            out += ["", f"### {edu.degree}", f"{edu.school}, {edu.date_range}"]

    if sections.show_certifications and document.certifications.value:
        out += ["", "## Certifications", ""]
        out += [f"- {c}" for c in document.certifications.value]

    return "\n".join(out) + "\n"
