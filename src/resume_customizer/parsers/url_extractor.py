"""Fetch a job posting URL and reduce it to plain text."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from resume_customizer.errors import ExtractionError
from resume_customizer.parsers.jd_parser import parse_jd
from resume_customizer.utils.url_validator import validate_url

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10.0
MAX_BODY_BYTES = 1_000_000
MAX_CONTENT_CHARS = 50_000
MIN_CONTENT_CHARS = 100
MAX_REDIRECTS = 5

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


@dataclass
class ExtractedPosting:
    content: str
    metadata: dict = field(default_factory=dict)


async def fetch_job_description(
    url: str,
    *,
    timeout: float = FETCH_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ExtractedPosting:
    """Fetch ``url`` and return its readable text.

    Every hop, redirects included, passes ``validate_url`` first, so
    SSRFError and ValueError propagate unchanged. The DNS lookups it does
    run in a worker thread. Fetch problems raise
    ExtractionError carrying an HTTP-style status code.
    """
    await asyncio.to_thread(validate_url, url)
    async with httpx.AsyncClient(
        timeout=timeout, headers=_HEADERS, follow_redirects=False, transport=transport
    ) as client:
        html = await _fetch_html(client, url)

    return extract_text(html, url)


async def _fetch_html(client: httpx.AsyncClient, url: str) -> str:
    current = url
    try:
        for _ in range(MAX_REDIRECTS + 1):
            async with client.stream("GET", current) as response:
                if response.is_redirect:
                    location = response.headers.get("location", "")
                    current = await asyncio.to_thread(validate_url, urljoin(current, location))
                    continue

                if not response.is_success:
                    raise ExtractionError(
                        f"HTTP {response.status_code}: {response.reason_phrase}",
                        status_code=response.status_code,
                    )

                content_type = response.headers.get("content-type", "")
                if "text/html" not in content_type:
                    raise ExtractionError("URL does not return HTML content", status_code=400)

                length = response.headers.get("content-length")
                if length and length.isdigit() and int(length) > MAX_BODY_BYTES:
                    raise ExtractionError("Content too large (max 1MB)", status_code=413)

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > MAX_BODY_BYTES:
                        raise ExtractionError("Content too large (max 1MB)", status_code=413)
                return body.decode(response.encoding or "utf-8", errors="replace")
    except httpx.TimeoutException as exc:
        raise ExtractionError("Request timeout", status_code=408) from exc
    except httpx.HTTPError as exc:
        logger.warning("Fetching %s failed: %s", url, exc)
        raise ExtractionError(f"Failed to fetch URL: {exc}", status_code=502) from exc

    raise ExtractionError("Too many redirects", status_code=502)


def extract_text(html: str, url: str = "") -> ExtractedPosting:
    """Strip markup and return the main text of an HTML page."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template", "svg"]):
        tag.decompose()

    title = soup.title.get_text(strip=True) if soup.title else None
    root = soup.find("main") or soup.find("article") or soup.body or soup
    text = root.get_text(separator="\n")
    text = parse_jd(re.sub(r"\n\s*\n+", "\n\n", text))[:MAX_CONTENT_CHARS]

    if len(text) < MIN_CONTENT_CHARS:
        raise ExtractionError(
            "Could not extract meaningful job description content from the page",
            status_code=422,
        )

    metadata = {"url": url}
    if title:
        metadata["title"] = title
    return ExtractedPosting(content=text, metadata=metadata)
