"""Deterministic customization used when the AI path fails."""

from __future__ import annotations

import logging
import re

from resume_customizer.models.customization import (
    CustomizationRequest,
    CustomizationResult,
    DisplayConfig,
    TitleBar,
)

logger = logging.getLogger(__name__)

TECH_KEYWORDS = (
    "python", "sql", "javascript", "react", "node.js", "aws", "docker",
    "kubernetes", "git", "api", "rest", "graphql", "mongodb", "postgresql",
    "redis", "elasticsearch", "kafka", "jenkins", "ci/cd", "devops",
    "machine learning", "ai", "data science", "analytics", "tableau",
    "power bi", "looker", "bigquery", "spark", "hadoop", "tensorflow",
    "pytorch", "scikit-learn", "pandas", "numpy", "jupyter",
)

MARKETING_KEYWORDS = (
    "seo", "sem", "google analytics", "google ads", "facebook ads",
    "social media", "content marketing", "email marketing", "crm",
    "hubspot", "salesforce", "mailchimp", "conversion optimization",
    "a/b testing", "growth hacking", "lead generation", "roi",
    "kpi", "campaign management", "brand management",
)

MANAGEMENT_KEYWORDS = (
    "project management", "team leadership", "leadership", "agile", "scrum",
    "kanban", "stakeholder management", "budget management",
    "strategic planning", "cross-functional", "collaboration",
    "communication", "mentoring", "coaching", "performance management",
    "change management",
)

KEYWORD_VOCABULARY = TECH_KEYWORDS + MARKETING_KEYWORDS + MANAGEMENT_KEYWORDS

# Later rules win when several match.
ROLE_RULES = (
    ("marketing", ("marketing", "growth")),
    ("technical", ("engineer", "developer", "technical")),
    ("data-analysis", ("data", "analyst", "analytics")),
    ("management", ("manager", "lead", "director")),
)

ROLE_TITLES: dict[str, TitleBar] = {
    "marketing": TitleBar(
        main="Growth Marketing Specialist / Digital Marketing Manager / Performance Marketing Expert",
        sub="Digital Marketing Strategy | Growth Hacking | Performance Optimization",
    ),
    "technical": TitleBar(
        main="Technical Project Manager / Full-Stack Developer / Data Engineer",
        sub="Software Development | Cloud Architecture | Technical Leadership",
    ),
    "data-analysis": TitleBar(
        main="Data Analyst / Business Intelligence Specialist / Marketing Data Analyst",
        sub="Data Analysis | Business Intelligence | Performance Analytics",
    ),
    "management": TitleBar(
        main="Product Manager / Technical Project Manager / Business Development Manager",
        sub="Strategic Leadership | Project Management | Business Development",
    ),
    "general": TitleBar(),
}

_KEYWORD_PATTERNS = {
    kw: re.compile(rf"(?<![\w]){re.escape(kw)}(?![\w])") for kw in KEYWORD_VOCABULARY
}


def extract_keywords(job_description: str) -> list[str]:
    """Vocabulary terms that occur in the job description as whole words."""
    text = (job_description or "").lower()
    return [kw for kw, pattern in _KEYWORD_PATTERNS.items() if pattern.search(text)]


def rank_competencies(competencies: list[str], keywords: list[str]) -> list[str]:
    """Order competencies by how many keywords they contain, most first.

    Matching is a case-insensitive substring test. Ties keep their original
    order.
    """
    lowered = [kw.lower() for kw in keywords]

    def score(competency: str) -> int:
        text = competency.lower()
        return sum(1 for kw in lowered if kw in text)

    return sorted(competencies, key=score, reverse=True)


def analyze_role(job_description: str) -> str:
    """Classify the posting into a role category for the title bar."""
    text = (job_description or "").lower()
    role = "general"
    for category, terms in ROLE_RULES:
        if any(term in text for term in terms):
            role = category
    return role


def display_config_for(job_description: str) -> DisplayConfig:
    return DisplayConfig(title_bar=ROLE_TITLES[analyze_role(job_description)])


class FallbackCustomizer:
    """Keyword-overlap re-ranking of core competencies. Never calls an LLM."""

    def customize(
        self, request: CustomizationRequest, reason: str | None = None
    ) -> CustomizationResult:
        keywords = extract_keywords(request.job_description)
        resume = request.base.model_copy(deep=True)
        resume.core_competencies.value = rank_competencies(
            resume.core_competencies.value, keywords
        )
        logger.info("Fallback customization: %d keywords matched", len(keywords))

        reasoning = (
            f"Fallback customization based on {len(keywords)} key requirements "
            "(AI service unavailable); only core competencies were reordered"
        )
        if reason:
            reasoning += f": {reason}"

        return CustomizationResult(
            resume=resume,
            reasoning=reasoning,
            config=display_config_for(request.job_description),
            fallback_used=True,
        )
