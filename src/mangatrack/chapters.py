"""Chapter-number extraction and title cleanup for reading progress.

URL patterns are tried in priority order: site-specific chapter suffixes,
generic chapter path segments, reader paths, a bare trailing number, and
finally a "Chapter N" mention in the page title.
"""

from __future__ import annotations

import logging
import math
import re
from urllib.parse import urlsplit

from mangatrack.text import normalize_whitespace


LOGGER = logging.getLogger(__name__)

_NUMBER = r"(\d+(?:\.\d+)?)"

# /chapter-123, ?chapter=123
_SUFFIX_RE = re.compile(rf"/chapter-{_NUMBER}|[?&]chapter={_NUMBER}", re.IGNORECASE)
# /chapter/123, /ch/123, /episode/123, /ep/123
_SEGMENT_RE = re.compile(rf"/(?:chapter|ch|episode|ep)/{_NUMBER}", re.IGNORECASE)
# /read/<series>/<lang>/chapter-123
_READ_RE = re.compile(rf"/read/[^/]+/[^/]+/chapter-?{_NUMBER}", re.IGNORECASE)
_BARE_NUMBER_RE = re.compile(_NUMBER)
_TITLE_RE = re.compile(rf"(?:Chapter|Ch\.?|Episode|Ep\.?)\s*{_NUMBER}", re.IGNORECASE)

# Anything at or above this is an id, not a chapter.
MAX_BARE_CHAPTER = 10000

KNOWN_SITES = (
    r"Asura\s*Scans?",
    r"Webtoons?",
    r"Manga\s*Fire",
    r"Weeb\s*Central",
    r"Manga\s*Dex",
    r"Manga\s*Kakalot",
    r"Manga\s*nato",
    r"Manga\s*Plus",
)
_SITE_SUFFIX_RE = re.compile(rf"\s*[-–—|]\s*(?:{'|'.join(KNOWN_SITES)})\s*$", re.IGNORECASE)
_CHAPTER_SUFFIX_RE = re.compile(rf"\s+(?:Chapter|Ch\.?|Episode|Ep\.?)\s*{_NUMBER}\s*$", re.IGNORECASE)


def _first_group(match: re.Match[str]) -> str:
    return next(group for group in match.groups() if group is not None)


def _bare_trailing_number(url: str) -> str | None:
    segments = [segment for segment in urlsplit(url).path.split("/") if segment]
    if not segments:
        return None
    match = _BARE_NUMBER_RE.fullmatch(segments[-1])
    if match is None:
        return None
    value = float(match.group(1))
    if 0 < value < MAX_BARE_CHAPTER:
        return match.group(1)
    return None


def extract_chapter_number(url: str, title: str | None = None) -> str | None:
    """Return the chapter number found in ``url`` (or ``title``) as a string."""

    for pattern in (_SUFFIX_RE, _SEGMENT_RE, _READ_RE):
        match = pattern.search(url or "")
        if match is not None:
            return _first_group(match)

    bare = _bare_trailing_number(url or "")
    if bare is not None:
        return bare

    if title:
        match = _TITLE_RE.search(title)
        if match is not None:
            return match.group(1)

    LOGGER.debug("No chapter number found in %s", url)
    return None


def clean_manga_title(title: str) -> str:
    """Strip trailing site names and chapter markers from a page title.

    >>> clean_manga_title("Swordmaster's Youngest Son Chapter 194 - Asura Scans")
    "Swordmaster's Youngest Son"
    """

    if not title:
        return ""

    cleaned = normalize_whitespace(title)
    while True:
        stripped = _SITE_SUFFIX_RE.sub("", cleaned)
        stripped = _CHAPTER_SUFFIX_RE.sub("", stripped).strip()
        if stripped == cleaned:
            return cleaned
        cleaned = stripped


def format_chapter_display(chapter: str | int | float | None) -> str:
    text = "" if chapter is None else str(chapter).strip()
    if text in ("", "0"):
        return "Not started"
    return f"Chapter {text}"


def calculate_progress(current_chapter: str | int | float, total_chapters: int | None) -> int:
    """Percentage of ``total_chapters`` read, clamped to 0..100."""

    if not total_chapters:
        return 0
    try:
        current = float(current_chapter)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(current) or current <= 0:
        return 0
    return min(100, max(0, round(current / total_chapters * 100)))
