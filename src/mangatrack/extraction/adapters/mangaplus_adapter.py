"""MANGA Plus (Shueisha) adapter."""

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

_VIEWER_RE = re.compile(r"/viewer/\d+", re.IGNORECASE)


class MangaPlusAdapter(BaseSiteAdapter):
    name = "MangaPlus"
    url_patterns = (r"mangaplus\.shueisha\.co\.jp/titles", r"mangaplus\.shueisha\.co\.jp/viewer")

    def build_program(self) -> ScrapingProgram:
        return ScrapingProgram(
            site=self.name,
            fields=(
                title_chain("h1.TitleDetailHeader-module_title"),
                description_chain(".TitleDetailHeader-module_overview", '[class*="overview"]', prefer_meta=False),
                cover_chain("img.TitleDetailHeader-module_img", 'img[class*="title"]'),
                text_chain("author", ".TitleDetailHeader-module_author", '[class*="author"]'),
                genres_chain(default=("Manga", "Shueisha")),
                status_chain(),
                source_url_chain(),
            ),
        )

    def is_chapter_page(self, url: str) -> bool:
        return bool(_VIEWER_RE.search(url))

    def get_series_url_from_chapter(self, chapter_url: str) -> str | None:
        # Viewer ids are chapter ids; the series id is not recoverable from the URL.
        return None
