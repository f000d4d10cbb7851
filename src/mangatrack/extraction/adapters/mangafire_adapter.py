"""MangaFire adapter: /manga/<slug> detail pages and /read/ reader pages."""

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

_READER_RE = re.compile(r"/read/([^/?#]+)", re.IGNORECASE)
_CHAPTER_QUERY_RE = re.compile(r"[?&]chapter=\d+", re.IGNORECASE)


class MangaFireAdapter(BaseSiteAdapter):
    name = "MangaFire"
    url_patterns = (r"mangafire\.to/manga", r"mangafire\.to/read")

    def build_program(self) -> ScrapingProgram:
        return ScrapingProgram(
            site=self.name,
            fields=(
                title_chain("h1.name", "h1.title", site_suffixes=(" - MangaFire",)),
                description_chain(".description", ".synopsis", '[class*="desc"]', prefer_meta=False),
                cover_chain("img.cover", "img.poster", 'img[alt*="cover"]'),
                text_chain("author", '[class*="author"] a', '[class*="author"]'),
                genres_chain(".genres a", '[class*="genre"] a', ".badge"),
                status_chain(".status", '[class*="status"]'),
                source_url_chain(),
            ),
        )

    def is_chapter_page(self, url: str) -> bool:
        return bool(_READER_RE.search(url) or _CHAPTER_QUERY_RE.search(url))

    def get_series_url_from_chapter(self, chapter_url: str) -> str | None:
        parts = urlsplit(chapter_url)
        reader = _READER_RE.search(parts.path)
        if reader is not None:
            return urlunsplit((parts.scheme, parts.netloc, f"/manga/{reader.group(1)}", "", ""))
        if _CHAPTER_QUERY_RE.search(chapter_url):
            return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
        return None
