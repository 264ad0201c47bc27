"""Typed exception hierarchy for resume-customizer.

The customizer catches every ``AIPipelineError`` and degrades to the
keyword fallback. Everything else propagates to the caller (CLI, API, UI),
which presents it directly.
"""

from __future__ import annotations


class ResumeCustomizerError(Exception):
    """Base exception for all resume-customizer errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(ResumeCustomizerError):
    """Raised when a provider cannot be constructed from configuration."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message, {"provider": provider})
        self.provider = provider


class AIPipelineError(ResumeCustomizerError):
    """Base for failures on the AI path that trigger the fallback customizer."""

    kind = "ai_error"


class TransportError(AIPipelineError):
    """Raised on network failure or a non-success status from the LLM provider."""

    kind = "transport"

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        super().__init__(
            f"{provider} request failed: {message}",
            {"provider": provider, "status_code": status_code},
        )
        self.provider = provider
        self.status_code = status_code


class ProviderAuthError(TransportError):
    """Raised when the provider rejects the configured credential."""

    kind = "authentication"


class ParseError(AIPipelineError):
    """Raised when no JSON object can be located or decoded in a completion."""

    kind = "parse"


class StructureError(AIPipelineError):
    """Raised when the decoded JSON lacks required resume fields."""

    kind = "structure"

    def __init__(self, missing: list[str]):
        super().__init__(
            f"Invalid resume data structure, missing: {', '.join(missing)}",
            {"missing": missing},
        )
        self.missing = missing


class BudgetExceededError(AIPipelineError):
    """Raised when a generated section is longer than its budget allows."""

    kind = "budget"

    def __init__(self, section: str, actual: int, limit: int, unit: str = "words"):
        super().__init__(
            f"{section} has {actual} {unit}, limit is {limit}",
            {"section": section, "actual": actual, "limit": limit, "unit": unit},
        )
        self.section = section
        self.actual = actual
        self.limit = limit
        self.unit = unit


class ValidationError(ResumeCustomizerError):
    """Raised when user input is missing or malformed."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, {"field": field})
        self.field = field


class SSRFError(ValueError):
    """Raised when a URL resolves to a blocked (private/internal) address."""


class ExtractionError(ResumeCustomizerError):
    """Raised when a job description cannot be fetched or extracted from a URL."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code


class PDFGenerationError(ResumeCustomizerError):
    """Raised when a PDF strategy fails to produce a document."""

    def __init__(self, strategy: str, reason: str):
        super().__init__(f"PDF generation ({strategy}) failed: {reason}", {"strategy": strategy})
        self.strategy = strategy


class ArchiveError(ResumeCustomizerError):
    """Raised on invalid archive operations (unknown item, blank label)."""
