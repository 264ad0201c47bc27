from __future__ import annotations

import logging
from pathlib import Path

import markdown
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from resume_customizer.errors import PDFGenerationError
from resume_customizer.export.markdown_builder import to_markdown
from resume_customizer.models.customization import DisplayConfig
from resume_customizer.models.resume import ResumeDocument

logger = logging.getLogger(__name__)

CSS_THEMES_DIR = Path(__file__).parent / "css_themes"
BASE_TEMPLATE_DIR = Path(__file__).parent

AVAILABLE_THEMES = ("professional", "modern", "minimal")
STRATEGIES = ("layout", "browser")

# A4 page margins shared by both strategies
PAGE_MARGINS = {"top": "20mm", "bottom": "20mm", "left": "15mm", "right": "15mm"}


def render_html_preview(
    document: ResumeDocument,
    config: DisplayConfig | None = None,
    theme: str = "professional",
) -> str:
    """Render the resume as a themed, standalone HTML page."""
    if theme not in AVAILABLE_THEMES:
        theme = "professional"
    return _md_to_styled_html(to_markdown(document, config), theme, document.header.name or "Resume")


async def render_pdf(
    document: ResumeDocument,
    config: DisplayConfig | None = None,
    theme: str = "professional",
    strategy: str = "layout",
) -> bytes:
    """Render the resume to PDF bytes.

    ``layout`` uses WeasyPrint (fpdf2 when WeasyPrint's system libraries
    are missing); ``browser`` prints the same HTML with headless Chromium.
    Raises PDFGenerationError on failure.
    """
    if strategy not in STRATEGIES:
        raise PDFGenerationError(strategy, f"unknown strategy, choose one of {STRATEGIES}")
    html = render_html_preview(document, config, theme)
    if strategy == "browser":
        from resume_customizer.export.browser_pdf import html_to_pdf_browser

        return await html_to_pdf_browser(html)
    return _html_to_pdf(html)


def _md_to_styled_html(md_text: str, theme: str, title: str) -> str:
    html_body = markdown.markdown(md_text, extensions=["tables", "nl2br"])
    css_path = CSS_THEMES_DIR / f"{theme}.css"
    css = css_path.read_text(encoding="utf-8") if css_path.exists() else ""
    env = Environment(
        loader=FileSystemLoader(str(BASE_TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template("base.html")
    return template.render(
        title=title,
        css=Markup(css),
        body=Markup(html_body),
        margins=PAGE_MARGINS,
    )


def _html_to_pdf(html: str) -> bytes:
    """Convert HTML string to PDF bytes using WeasyPrint, with fpdf2 fallback."""
    try:
        from weasyprint import HTML
    except (ImportError, OSError):
        logger.warning("WeasyPrint not available, using fpdf2 fallback")
        from resume_customizer.export.pdf_fallback import html_to_pdf_fpdf2

        return html_to_pdf_fpdf2(html)

    try:
        return HTML(string=html).write_pdf()
    except Exception as exc:
        raise PDFGenerationError("layout", str(exc)) from exc
