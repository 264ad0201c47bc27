"""Utility to extract a JSON object from LLM responses."""

from __future__ import annotations

import json

from resume_customizer.errors import ParseError


def extract_json(text: str) -> dict:
    """Extract the top-level JSON object from an LLM completion.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. Find first '{' to last '}' and parse

    Raises ParseError when no object can be located or decoded, or when the
    decoded value is not an object.
    """
    if not isinstance(text, str):
        raise ParseError("Completion is not text")
    text = text.strip()

    # 1) Direct parse
    result = _loads_object(text)
    if result is not None:
        return result

    # 2) Strip fenced code block markers
    stripped = _strip_code_fences(text)
    if stripped != text:
        result = _loads_object(stripped)
        if result is not None:
            return result

    # 3) First '{' to last '}'
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ParseError(f"No JSON object found in response: {text[:200]}...")

    result = _loads_object(text[start : end + 1])
    if result is None:
        raise ParseError(f"Malformed JSON object in response: {text[start:start + 200]}...")
    return result


def _loads_object(text: str) -> dict | None:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")

    # Remove opening fence (```json, ```, etc.)
    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]

    # Remove closing fence
    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]

    return "\n".join(lines).strip()
