"""AsuraScans adapter.

Series pages render client-side and carry large hero/background artwork, so
the cover chain prefers alt-text matches and filters the site's banner files.
"""

from __future__ import annotations

import re

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

_SERIES_RE = re.compile(r"(.*/series/[^/?#]+)", re.IGNORECASE)


class AsuraScansAdapter(BaseSiteAdapter):
    name = "AsuraScans"
    url_patterns = (r"asuracomic\.net/series", r"asurascans\.")

    def build_program(self) -> ScrapingProgram:
        return ScrapingProgram(
            site=self.name,
            fields=(
                title_chain(site_suffixes=(" - Asura Scans", " | Asura Scans")),
                description_chain(".description", '[class*="description"]', ".summary", '[class*="summary"]'),
                cover_chain(extra_tokens=("toraka-hero",)),
                text_chain("author", 'a[href*="author"]', '[class*="author"]'),
                genres_chain('a[href*="genre"]', ".genres a", '[class*="genre"] a'),
                status_chain('[class*="status"]', ".post-status span"),
                source_url_chain(),
            ),
        )

    def get_series_url_from_chapter(self, chapter_url: str) -> str | None:
        if not self.is_chapter_page(chapter_url):
            return None
        match = _SERIES_RE.match(chapter_url)
        return match.group(1) if match else None
