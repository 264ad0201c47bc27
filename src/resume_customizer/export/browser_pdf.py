"""Headless-browser PDF printing via Playwright."""

from __future__ import annotations

import logging

from resume_customizer.errors import PDFGenerationError

logger = logging.getLogger(__name__)


async def html_to_pdf_browser(html: str, timeout_ms: int = 30000) -> bytes:
    """Print an HTML page to an A4 PDF with Chromium."""
    from playwright.async_api import Error as PlaywrightError
    from playwright.async_api import async_playwright

    from resume_customizer.export.pdf_renderer import PAGE_MARGINS

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="networkidle", timeout=timeout_ms)
                return await page.pdf(
                    format="A4",
                    print_background=True,
                    margin=PAGE_MARGINS,
                )
            finally:
                await browser.close()
    except PlaywrightError as exc:
        logger.error("Browser PDF generation failed", exc_info=True)
        raise PDFGenerationError("browser", str(exc)) from exc
