"""Text normalization helpers used by scraping and title cleanup."""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_PUNCTUATION_RE = re.compile(r"[\s,;:|/.]+$")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_text(text: str) -> str:
    """Produce stable text for case-insensitive comparisons."""

    normalized = unicodedata.normalize("NFKC", text)
    return normalize_whitespace(normalized).casefold()


def strip_trailing_punctuation(text: str) -> str:
    return _TRAILING_PUNCTUATION_RE.sub("", text)


def truncate(text: str, max_length: int | None) -> str:
    if max_length is None or len(text) <= max_length:
        return text
    return text[:max_length]
