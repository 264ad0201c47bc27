"""Validation of LLM completions against the base resume and its budgets."""

from __future__ import annotations

import copy
import logging
from typing import Any

from resume_customizer.errors import BudgetExceededError, StructureError
from resume_customizer.models.resume import (
    DEFAULT_EDITABLE_FIELDS,
    EditableFields,
    ResumeDocument,
)
from resume_customizer.pipeline.budget import budget_report, section_items, section_texts
from resume_customizer.utils.json_parser import extract_json
from resume_customizer.utils.word_count import count_words

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("header", "summary", "coreCompetencies")

# Keys holding legacy markers are never taken from a completion.
_MARKER_PREFIX = "_dynamic"


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _word_section_path(section: str) -> str:
    if section.startswith("experience_"):
        return f"professionalExperience.{section.split('_', 1)[1]}.description"
    return section


class ResponseValidator:
    """Turns a raw completion into a ResumeDocument or raises an AI-path error.

    The returned document starts as a copy of ``original``; only paths
    allowed by ``editable`` are taken from the completion, and only where the
    completion's value has the same type as the original's.
    """

    def __init__(
        self,
        original: ResumeDocument,
        word_budget: dict[str, int],
        item_budget: dict[str, int] | None = None,
        editable: EditableFields = DEFAULT_EDITABLE_FIELDS,
    ):
        self.original = original
        self.word_budget = word_budget
        self.item_budget = item_budget or {}
        self.editable = editable

    def validate(self, raw_text: str) -> ResumeDocument:
        """Parse, check and merge a completion.

        Raises ParseError, StructureError or BudgetExceededError.
        """
        data = extract_json(raw_text)

        missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
        if missing:
            raise StructureError(missing)

        self._check_words(data)
        self._check_items(data)

        merged = self._merge(self.original.to_wire(), data, "", False)
        return ResumeDocument.from_wire(merged)

    def is_editable(self, path: str) -> bool:
        """True when ``path`` or any of its parents is editable."""
        return self.editable.covers(path)

    def _check_words(self, data: dict) -> None:
        texts = section_texts(data)
        for section, limit in self.word_budget.items():
            if not self.is_editable(_word_section_path(section)):
                continue
            actual = count_words(texts.get(section, ""))
            if actual > limit:
                logger.warning(
                    "Budget exceeded: section=%s actual=%d limit=%d", section, actual, limit
                )
                for row in budget_report(self.original, data, self.word_budget):
                    logger.debug(
                        "  %s: original=%d generated=%d limit=%d truncated=%d",
                        row.section, row.original, row.generated, row.limit, row.truncated,
                    )
                raise BudgetExceededError(section, actual, limit)

    def _check_items(self, data: dict) -> None:
        items = section_items(data)
        for section, limit in self.item_budget.items():
            value = items.get(section)
            if value is None or not self.is_editable(section):
                continue
            if len(value) > limit:
                logger.warning(
                    "Item budget exceeded: section=%s actual=%d limit=%d",
                    section, len(value), limit,
                )
                raise BudgetExceededError(section, len(value), limit, unit="items")

    def _merge(self, original: Any, generated: Any, path: str, editable: bool) -> Any:
        editable = editable or (bool(path) and self.editable.allows(path))

        if isinstance(original, dict):
            if not isinstance(generated, dict):
                return copy.deepcopy(original)
            merged = {}
            for key, value in original.items():
                if key.startswith(_MARKER_PREFIX) or key not in generated:
                    merged[key] = copy.deepcopy(value)
                else:
                    merged[key] = self._merge(value, generated[key], _join(path, key), editable)
            return merged

        if isinstance(original, list) and original and all(isinstance(v, dict) for v in original):
            # Entries are matched by index; extra generated entries are dropped.
            if not isinstance(generated, list):
                return copy.deepcopy(original)
            return [
                self._merge(entry, generated[i], _join(path, str(i)), editable)
                if i < len(generated)
                else copy.deepcopy(entry)
                for i, entry in enumerate(original)
            ]

        if not editable:
            return copy.deepcopy(original)
        if isinstance(original, list):
            if isinstance(generated, list) and all(isinstance(v, str) for v in generated):
                return list(generated)
            return list(original)
        if isinstance(original, str) and isinstance(generated, str):
            return generated
        return original
