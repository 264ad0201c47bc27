"""Prompt assembly for the AI customization call."""

from __future__ import annotations

from dataclasses import dataclass

from resume_customizer.errors import ValidationError
from resume_customizer.models.resume import (
    DEFAULT_EDITABLE_FIELDS,
    EditableFields,
    ResumeDocument,
)

PERSONA = """\
You are an expert resume writer and ATS optimization specialist. Analyze the job \
description and customize the resume to maximize relevance and ATS compatibility.

CRITICAL INSTRUCTIONS:
1. ONLY modify the editable fields listed under CONSTRAINTS
2. Preserve all other data exactly as provided
3. Return valid JSON in the exact same structure
4. Use natural language - avoid keyword stuffing
5. Maintain truthfulness - enhance, don't fabricate"""


@dataclass(frozen=True)
class PromptStyle:
    id: str
    name: str
    description: str
    text: str


def _style(id: str, name: str, description: str, heading: str, sections: dict[str, list[str]]) -> PromptStyle:
    lines = [f"{heading}:"]
    for title, points in sections.items():
        lines.append("")
        lines.append(f"{title}:")
        lines.extend(f"- {point}" for point in points)
    return PromptStyle(id, name, description, "\n".join(lines))


PROMPT_STYLES: dict[str, PromptStyle] = {
    s.id: s
    for s in (
        _style(
            "general",
            "General Purpose",
            "Balanced approach suitable for most job applications",
            "CUSTOMIZATION STRATEGY",
            {
                "Core Competencies (Reorder & Prioritize)": [
                    "Move job-relevant skills to the top 3-5 positions",
                    "Keep skills that match job requirements",
                    "Maintain professional language and avoid duplicates",
                ],
                "Professional Summary (Adapt & Optimize)": [
                    "Incorporate 3-5 key terms from the job description naturally",
                    "Emphasize experience most relevant to the target role",
                    "Maintain professional tone and readability",
                ],
                "Technical Proficiency (Highlight Relevant)": [
                    "Prioritize technologies mentioned in the job description",
                    "Group related skills logically",
                ],
                "Professional Experience (Emphasize Relevance)": [
                    "Focus on achievements that match job requirements",
                    "Quantify results where possible",
                    "Use action verbs that align with the job description",
                ],
            },
        ),
        _style(
            "technical",
            "Technical/Engineering",
            "Optimized for software engineering, data science, and technical roles",
            "TECHNICAL ROLE OPTIMIZATION",
            {
                "Core Competencies (Technical Focus)": [
                    "Prioritize languages, frameworks and tools mentioned in the job description",
                    "Highlight problem-solving and analytical skills",
                    "Include relevant methodologies (Agile, DevOps, etc.)",
                ],
                "Professional Summary (Technical Emphasis)": [
                    "Lead with years of technical experience and key technologies",
                    "Mention specific technical achievements or projects",
                ],
                "Technical Proficiency (Detailed Technical Skills)": [
                    "Match the exact technology stack mentioned in the job description",
                    "Prioritize the most relevant technologies in each category",
                ],
                "Professional Experience (Technical Achievements)": [
                    "Quantify technical impact (performance improvements, user growth, etc.)",
                    "Highlight system design and architecture experience",
                    "Emphasize scalability, optimization and best practices",
                ],
            },
        ),
        _style(
            "marketing",
            "Marketing/Growth",
            "Tailored for marketing, growth, and digital marketing positions",
            "MARKETING ROLE OPTIMIZATION",
            {
                "Core Competencies (Marketing Focus)": [
                    "Prioritize digital marketing channels mentioned in the job description",
                    "Highlight data analysis and performance optimization skills",
                    "Emphasize campaign management and creative strategy",
                ],
                "Professional Summary (Marketing Impact)": [
                    "Lead with measurable marketing achievements (ROI, growth rates, etc.)",
                    "Emphasize data-driven decision making",
                ],
                "Technical Proficiency (Marketing Tools & Analytics)": [
                    "Prioritize marketing platforms mentioned in the job description",
                    "Highlight analytics and reporting capabilities",
                ],
                "Professional Experience (Marketing Results)": [
                    "Quantify marketing impact (conversion rates, CTR, ROAS, etc.)",
                    "Highlight successful campaigns and their results",
                    "Emphasize testing, optimization and continuous improvement",
                ],
            },
        ),
        _style(
            "management",
            "Leadership/Management",
            "Designed for management, leadership, and executive positions",
            "LEADERSHIP ROLE OPTIMIZATION",
            {
                "Core Competencies (Leadership Focus)": [
                    "Prioritize leadership and management skills mentioned in the job description",
                    "Highlight strategic planning and business development",
                    "Emphasize cross-functional collaboration and stakeholder management",
                ],
                "Professional Summary (Leadership Impact)": [
                    "Lead with team size and organizational impact",
                    "Include P&L responsibility or budget management",
                ],
                "Technical Proficiency (Business & Management Tools)": [
                    "Focus on business intelligence and analytics platforms",
                    "Include project management and collaboration tools",
                ],
                "Professional Experience (Leadership Achievements)": [
                    "Quantify team and business impact (revenue growth, cost savings, etc.)",
                    "Highlight team building and talent development",
                    "Include change management and process improvement",
                ],
            },
        ),
        _style(
            "sales",
            "Sales/Business Development",
            "Optimized for sales, business development, and revenue-focused roles",
            "SALES ROLE OPTIMIZATION",
            {
                "Core Competencies (Sales Focus)": [
                    "Prioritize sales methodologies mentioned in the job description",
                    "Highlight customer relationship management and business development",
                    "Include negotiation and closing capabilities",
                ],
                "Professional Summary (Sales Performance)": [
                    "Lead with quantifiable sales achievements (quota attainment, revenue growth)",
                    "Emphasize relationship building and account management",
                ],
                "Technical Proficiency (Sales Tools & CRM)": [
                    "Prioritize CRM and sales enablement tools mentioned in the job description",
                    "Include sales analytics and reporting platforms",
                ],
                "Professional Experience (Sales Results)": [
                    "Quantify sales performance (quota achievement, revenue generated, etc.)",
                    "Highlight new business acquisition and account growth",
                    "Include customer retention and upselling success",
                ],
            },
        ),
        _style(
            "creative",
            "Creative/Design",
            "Tailored for creative, design, and content creation roles",
            "CREATIVE ROLE OPTIMIZATION",
            {
                "Core Competencies (Creative Focus)": [
                    "Prioritize design skills and creative software mentioned in the job description",
                    "Highlight brand development and visual communication",
                    "Include user experience and design thinking capabilities",
                ],
                "Professional Summary (Creative Impact)": [
                    "Lead with creative achievements and portfolio highlights",
                    "Emphasize creative problem-solving and innovation",
                ],
                "Technical Proficiency (Creative Tools & Software)": [
                    "Prioritize design software and platforms mentioned in the job description",
                    "Highlight technical skills that support creative work",
                ],
                "Professional Experience (Creative Achievements)": [
                    "Highlight successful projects and their impact",
                    "Mention awards, recognition or portfolio pieces",
                    "Show collaboration with developers, marketers and stakeholders",
                ],
            },
        ),
    )
}

DEFAULT_STYLE = "general"

_RULE = "━" * 48


def get_style(name: str) -> PromptStyle:
    """Look up a named style, raising ValidationError for unknown names."""
    try:
        return PROMPT_STYLES[name]
    except KeyError:
        raise ValidationError(
            f"Unknown style {name!r}; choose one of: {', '.join(PROMPT_STYLES)}",
            field="style",
        ) from None


def _constraint_lines(
    editable: EditableFields, word_budget: dict[str, int], item_budget: dict[str, int]
) -> list[str]:
    lines = [
        "CONSTRAINTS:",
        "EDITABLE FIELDS: " + ", ".join(sorted(editable.patterns)),
        "",
        "WORD LIMITS (STRICTLY ENFORCED):",
    ]
    for section, limit in word_budget.items():
        if section == "summary":
            label = "Summary"
        else:
            label = f"Experience entry {int(section.split('_', 1)[1]) + 1} description"
        lines.append(f"- {label}: MAX {limit} words")

    if item_budget:
        lines.append("")
        lines.append("ITEM LIMITS (STRICTLY ENFORCED):")
        for section, limit in item_budget.items():
            lines.append(f"- {section}: MAX {limit} items")

    lines.append("")
    lines.append(
        "Any section over its limit causes the whole response to be rejected. "
        "NEVER truncate with \"...\" or similar; every section must be complete "
        "and meaningful within its limit."
    )
    return lines


def build_prompt(
    job_description: str,
    template: PromptStyle | str,
    word_budget: dict[str, int],
    item_budget: dict[str, int],
    document: ResumeDocument,
    editable: EditableFields = DEFAULT_EDITABLE_FIELDS,
) -> str:
    """Assemble the customization prompt.

    ``template`` is a ``PromptStyle`` or free-text instructions, which are
    used verbatim even when they match a style id. Order of the parts:
    persona, template, constraints (editable fields and budgets), job
    description, resume JSON.
    """
    template_text = template.text if isinstance(template, PromptStyle) else template

    parts = [
        PERSONA,
        "",
        template_text.strip(),
        "",
        *_constraint_lines(editable, word_budget, item_budget),
        "",
        _RULE,
        "JOB DESCRIPTION:",
        _RULE,
        "",
        job_description,
        "",
        _RULE,
        "MOTHER RESUME DATA TO OPTIMIZE:",
        _RULE,
        "",
        document.to_json(indent=2),
        "",
        _RULE,
        "RETURN: Optimized resume as valid JSON in exact same structure.",
        _RULE,
    ]
    return "\n".join(parts)
