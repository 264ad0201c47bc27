"""Resume export: Markdown, HTML preview and PDF."""
from resume_customizer.export.markdown_builder import to_markdown
from resume_customizer.export.pdf_renderer import (
    AVAILABLE_THEMES,
    STRATEGIES,
    render_html_preview,
    render_pdf,
)

__all__ = ["to_markdown", "render_pdf", "render_html_preview", "AVAILABLE_THEMES", "STRATEGIES"]
