"""Tests for Markdown, HTML preview and PDF export."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from resume_customizer.errors import PDFGenerationError
from resume_customizer.export import render_html_preview, render_pdf, to_markdown
from resume_customizer.export.pdf_fallback import _parse_blocks, html_to_pdf_fpdf2
from resume_customizer.models.customization import DisplayConfig, SectionToggles, TitleBar


class TestToMarkdown:
    def test_all_sections(self, mother_resume):
        md = to_markdown(mother_resume)

        assert md.startswith(f"# {mother_resume.header.name}\n")
        for heading in (
            "## Professional Summary",
            "## Core Competencies",
            "## Technical Proficiency",
            "## Professional Experience",
            "## Education",
            "## Certifications",
        ):
            assert heading in md
        assert "- **ML / AI:** scikit-learn, pandas" in md
        assert f"**{TitleBar().main}**" in md

    def test_competency_order_kept(self, mother_resume):
        md = to_markdown(mother_resume)
        first, second = mother_resume.core_competencies.value[:2]
        assert md.index(f"- {first}") < md.index(f"- {second}")

    def test_section_toggles(self, mother_resume):
        config = DisplayConfig(
            sections=SectionToggles(show_technical_proficiency=False, show_certifications=False)
        )
        md = to_markdown(mother_resume, config)
        assert "## Technical Proficiency" not in md
        assert "## Certifications" not in md
        assert "## Professional Experience" in md

    def test_custom_title_bar(self, mother_resume):
        config = DisplayConfig(title_bar=TitleBar(main="Data Analyst", sub=""))
        md = to_markdown(mother_resume, config)
        assert "**Data Analyst**" in md
        assert f"*{TitleBar().sub}*" not in md


class TestHtmlPreview:
    def test_themed_page(self, mother_resume):
        html = render_html_preview(mother_resume, theme="modern")
        assert "<html" in html
        assert f"<h1>{mother_resume.header.name}</h1>" in html
        assert "@page" in html

    def test_unknown_theme_falls_back(self, mother_resume):
        assert render_html_preview(mother_resume, theme="neon") == render_html_preview(mother_resume)


class TestRenderPdf:
    async def test_layout_strategy(self, mother_resume):
        with patch(
            "resume_customizer.export.pdf_renderer._html_to_pdf", return_value=b"%PDF-layout"
        ) as convert:
            assert await render_pdf(mother_resume) == b"%PDF-layout"
        assert mother_resume.header.name in convert.call_args.args[0]

    async def test_browser_strategy(self, mother_resume):
        with patch(
            "resume_customizer.export.browser_pdf.html_to_pdf_browser",
            new=AsyncMock(return_value=b"%PDF-browser"),
        ):
            assert await render_pdf(mother_resume, strategy="browser") == b"%PDF-browser"

    async def test_unknown_strategy(self, mother_resume):
        with pytest.raises(PDFGenerationError, match="unknown strategy"):
            await render_pdf(mother_resume, strategy="latex")


class TestFpdf2Fallback:
    def test_parse_blocks(self):
        blocks = _parse_blocks("<h1>Alex</h1><p>Data &amp; growth</p><ul><li>SQL</li></ul>")
        assert blocks == [("h1", "Alex"), ("text", "Data & growth"), ("bullet", "SQL"), ("break", "")]

    def test_produces_pdf(self, mother_resume):
        pdf = html_to_pdf_fpdf2(render_html_preview(mother_resume))
        assert pdf.startswith(b"%PDF")
