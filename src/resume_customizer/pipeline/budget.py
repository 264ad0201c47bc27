"""Word and item budgets derived from the base resume."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from resume_customizer.models.resume import SKILL_CATEGORIES, ResumeDocument
from resume_customizer.utils.word_count import count_words, truncate_to_word_count


@dataclass
class SectionBudgetReport:
    section: str
    original: int
    generated: int
    limit: int
    truncated: int

    @property
    def over(self) -> bool:
        return self.generated > self.limit


def _ceiling(text: str, multiplier: float) -> int:
    # round() keeps 50 * 1.2 from landing on 61 through float error
    return math.ceil(round(count_words(text) * multiplier, 6))


def _value(section: Any) -> Any:
    return section.get("value") if isinstance(section, dict) else None


def section_texts(data: ResumeDocument | dict) -> dict[str, str]:
    """Map word-budget section names to their text in a wire-format resume.

    Missing or non-string fields map to an empty string.
    """
    if isinstance(data, ResumeDocument):
        data = data.to_wire()

    def as_text(value: Any) -> str:
        return value if isinstance(value, str) else ""

    texts = {"summary": as_text(_value(data.get("summary")))}
    experience = data.get("professionalExperience")
    if isinstance(experience, list):
        for i, entry in enumerate(experience):
            description = entry.get("description") if isinstance(entry, dict) else None
            texts[f"experience_{i}"] = as_text(_value(description))
    return texts


def section_items(data: ResumeDocument | dict) -> dict[str, list | None]:
    """Map item-budget section names to their lists (None when not a list)."""
    if isinstance(data, ResumeDocument):
        data = data.to_wire()

    def as_list(value: Any) -> list | None:
        return value if isinstance(value, list) else None

    items = {
        "coreCompetencies": as_list(_value(data.get("coreCompetencies"))),
        "certifications": as_list(_value(data.get("certifications"))),
    }
    proficiency = data.get("technicalProficiency")
    for category in SKILL_CATEGORIES:
        value = proficiency.get(category) if isinstance(proficiency, dict) else None
        items[f"technicalProficiency.{category}"] = as_list(value)
    return items


def compute_word_budget(document: ResumeDocument, multiplier: float = 1.0) -> dict[str, int]:
    """Per-section word ceilings: original word count times ``multiplier``, rounded up.

    Keys are ``summary`` and ``experience_<i>`` for every experience entry.
    An empty section gets a ceiling of 0.
    """
    return {
        section: _ceiling(text, multiplier)
        for section, text in section_texts(document).items()
    }


def compute_item_budget(document: ResumeDocument) -> dict[str, int]:
    """Per-list item ceilings: the original item count of each list."""
    return {
        section: len(items or [])
        for section, items in section_items(document).items()
    }


def budget_report(
    original: ResumeDocument | dict,
    generated: ResumeDocument | dict,
    budget: dict[str, int],
) -> list[SectionBudgetReport]:
    """Compare generated word counts with the budget, section by section.

    ``truncated`` is the word count the generated text would have after
    ``truncate_to_word_count``; it is reported, never applied.
    """
    before = section_texts(original)
    after = section_texts(generated)
    report = []
    for section, limit in budget.items():
        text = after.get(section, "")
        report.append(
            SectionBudgetReport(
                section=section,
                original=count_words(before.get(section, "")),
                generated=count_words(text),
                limit=limit,
                truncated=count_words(truncate_to_word_count(text, limit)),
            )
        )
    return report
