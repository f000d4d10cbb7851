"""Webtoons adapter: /<lang>/<genre>/<series>/list pages."""

from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

from mangatrack.extraction.adapters.base import BaseSiteAdapter
from mangatrack.extraction.strategies import (
    ScrapingProgram,
    cover_chain,
    description_chain,
    genres_chain,
    source_url_chain,
    status_chain,
    text_chain,
    title_chain,
)

_CHAPTER_RE = re.compile(r"viewer\?title_no=|/episode/", re.IGNORECASE)
_TITLE_NO_RE = re.compile(r"title_no=(\d+)")
_VIEWER_SEGMENTS = {"viewer", "episode"}


class WebtoonsAdapter(BaseSiteAdapter):
    """Extract series metadata from webtoons.com list pages."""

    name = "Webtoons"
    url_patterns = (r"webtoons\.com/[a-z]+/[a-z-]+/[a-z0-9-]+",)

    def build_program(self) -> ScrapingProgram:
        return ScrapingProgram(
            site=self.name,
            fields=(
                title_chain(
                    "h1.subj",
                    "h1._title",
                    ".info h1",
                    ".detail_header h1",
                    'h1[class*="title"]',
                    site_suffixes=(" | WEBTOON", "WEBTOON"),
                ),
                description_chain(
                    "p.summary",
                    "p._summary",
                    ".summary",
                    ".detail_body p",
                    'p[class*="summary"]',
                    'p[class*="description"]',
                    prefer_meta=False,
                ),
                cover_chain(
                    "img.thumb",
                    "span._thumbnail img",
                    ".detail_header img",
                    ".detail_body img",
                    'img[class*="thumb"]',
                    'img[class*="cover"]',
                ),
                text_chain(
                    "author",
                    ".author",
                    "._authorName",
                    ".detail_header .author",
                    'a[href*="/creator/"]',
                    ".creator_name",
                    remove_words=("author info", "author"),
                ),
                genres_chain("h2._genre", ".info .genre", "span.genre", 'a[href*="/genre/"]', default=("Webtoon",)),
                status_chain(".day_info", "._statusText", ".info .status", 'span[class*="status"]'),
                source_url_chain(canonical_suffix="/list"),
            ),
        )

    def is_chapter_page(self, url: str) -> bool:
        return bool(_CHAPTER_RE.search(url))

    def get_series_url_from_chapter(self, chapter_url: str) -> str | None:
        match = _TITLE_NO_RE.search(chapter_url)
        if match is None:
            return None

        parts = urlsplit(chapter_url)
        segments = [segment for segment in parts.path.split("/") if segment]
        kept: list[str] = []
        for segment in segments:
            if segment in _VIEWER_SEGMENTS:
                break
            kept.append(segment)
        # /<lang>/<genre>/<series>; anything deeper is the episode slug.
        path = "/" + "/".join(kept[:3]) + "/list"
        return urlunsplit((parts.scheme, parts.netloc, path, f"title_no={match.group(1)}", ""))
