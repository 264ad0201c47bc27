"""Job description normalization and labelling helpers."""

from __future__ import annotations

import re
from pathlib import Path

_COMPANY_PATTERNS = (
    re.compile(r"\bCompany:\s*([A-Z][\w&.\- ]{1,60})"),
    re.compile(r"\b(?:at|join) ([A-Z][\w&.\-]*(?: [A-Z][\w&.\-]*){0,2})"),
    re.compile(r"([A-Z][\w&.\-]*(?: [A-Z][\w&.\-]*){0,2}) is (?:looking|seeking|hiring)"),
)

_ROLE_PATTERNS = (
    re.compile(r"\b(?:Job Title|Position|Role):\s*([^\n]{2,80})", re.IGNORECASE),
)


def parse_jd(text: str) -> str:
    """Clean and normalize job description text."""
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(lines).strip()


def load_jd_file(file_path: str | Path) -> str:
    """Load JD from a text file."""
    return parse_jd(Path(file_path).read_text(encoding="utf-8"))


def extract_company_or_role(text: str) -> str | None:
    """Best-effort company name (or, failing that, role title) for labels.

    Used only for file names and archive labels.
    """
    for pattern in _COMPANY_PATTERNS + _ROLE_PATTERNS:
        match = pattern.search(text or "")
        if match:
            label = " ".join(match.group(1).split()[:3]).strip(" .,")
            if label:
                return label
    return None


def safe_filename(label: str | None) -> str:
    """PDF file name for a label: ``Resume-<Label>.pdf``, or ``Resume-Custom.pdf``."""
    safe = re.sub(r"[^a-zA-Z0-9]+", "_", label or "").strip("_")
    return f"Resume-{safe or 'Custom'}.pdf"
