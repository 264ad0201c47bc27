"""Fallback PDF renderer using fpdf2 (pure Python, no system deps)."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path

from fpdf import FPDF
from fpdf.errors import FPDFException

from resume_customizer.errors import PDFGenerationError

logger = logging.getLogger(__name__)

# Unicode TTF fonts (Linux, macOS, Windows); Helvetica is used when none exist.
_UNICODE_FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

# tag -> (font size, line height, space before)
_BLOCK_STYLES = {
    "h1": (18, 9, 0),
    "h2": (12, 7, 4),
    "h3": (10.5, 6, 2),
    "bullet": (9.5, 5, 0),
    "text": (9.5, 5, 0),
}

_TAG_RE = re.compile(r"(</?(?:h[1-3]|p|li|ul|ol)>|<br\s*/?>)")


def _find_unicode_font() -> str | None:
    for path in _UNICODE_FONT_PATHS:
        if Path(path).exists():
            return path
    return None


def html_to_pdf_fpdf2(html_content: str) -> bytes:
    """Lay out the preview HTML as a plain A4 PDF."""
    body_match = re.search(r"<body[^>]*>(.*?)</body>", html_content, re.DOTALL)
    body = body_match.group(1) if body_match else html_content

    pdf = FPDF(format="A4", unit="mm")
    pdf.set_margins(left=15, top=20, right=15)
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()

    font_name = "Helvetica"
    font_path = _find_unicode_font()
    if font_path:
        pdf.add_font("ResumeSans", "", font_path)
        font_name = "ResumeSans"
    pdf.set_font(font_name, size=10)

    try:
        for kind, text in _parse_blocks(body):
            if kind == "break":
                pdf.ln(2)
                continue
            size, height, before = _BLOCK_STYLES[kind]
            if before:
                pdf.ln(before)
            pdf.set_font_size(size)
            prefix = ""
            if kind == "bullet":
                prefix = "\u2022 " if pdf.is_ttf_font else "- "
            pdf.multi_cell(0, height, prefix + _encodable(text, pdf), new_x="LMARGIN", new_y="NEXT")
            if kind in ("h1", "h2"):
                y = pdf.get_y() + 0.5
                pdf.line(pdf.l_margin, y, pdf.w - pdf.r_margin, y)
                pdf.ln(1.5)
        return bytes(pdf.output())
    except FPDFException as exc:
        raise PDFGenerationError("layout", str(exc)) from exc


def _encodable(text: str, pdf: FPDF) -> str:
    """Core fonts only cover latin-1; replace anything else."""
    if pdf.is_ttf_font:
        return text
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _parse_blocks(body_html: str) -> list[tuple[str, str]]:
    """Split simple HTML into (kind, text) blocks."""
    blocks: list[tuple[str, str]] = []
    kind = "text"
    for part in _TAG_RE.split(body_html):
        part = part.strip()
        if not part:
            continue
        tag = _TAG_RE.fullmatch(part)
        if not tag:
            text = html.unescape(re.sub(r"<[^>]+>", "", part)).strip()
            if text:
                blocks.append((kind, text))
            continue

        name = part.strip("</>").split()[0].rstrip("/")
        if part.startswith("</"):
            if name in ("ul", "ol"):
                blocks.append(("break", ""))
            kind = "text"
        elif name in ("h1", "h2", "h3"):
            kind = name
        elif name == "li":
            kind = "bullet"
        elif name == "br":
            continue
        else:
            kind = "text"
    return blocks
