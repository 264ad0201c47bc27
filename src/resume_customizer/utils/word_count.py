"""Word counting and sentence-aware truncation."""

from __future__ import annotations

_SENTENCE_END = (".", "!", "?")

# Fraction of the cut text a sentence boundary must lie beyond to be used.
_BOUNDARY_RATIO = 0.7


def count_words(text: object) -> int:
    """Count whitespace-separated, non-empty tokens. Non-strings count as 0."""
    if not text or not isinstance(text, str):
        return 0
    return len(text.split())


def truncate_to_word_count(text: str, max_words: int) -> str:
    """Return at most ``max_words`` words of ``text``.

    Text already within the limit is returned unchanged. Otherwise the first
    ``max_words`` words are kept, and the cut is moved back to the last
    sentence terminator when that terminator sits beyond 70% of the kept
    text, so the result does not lose too much.
    """
    if not text or not isinstance(text, str):
        return ""

    words = text.split()
    max_words = max(max_words, 0)
    if len(words) <= max_words:
        return text

    result = " ".join(words[:max_words])
    last_end = max(result.rfind(mark) for mark in _SENTENCE_END)
    if last_end > len(result) * _BOUNDARY_RATIO:
        result = result[: last_end + 1]
    return result.strip()
