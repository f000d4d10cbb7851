"""MangaDex adapter: /title/<uuid>/<slug> pages."""

from __future__ import annotations

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


class MangaDexAdapter(BaseSiteAdapter):
    name = "MangaDex"
    url_patterns = (r"mangadex\.org/title/[a-f0-9-]+",)

    def build_program(self) -> ScrapingProgram:
        return ScrapingProgram(
            site=self.name,
            fields=(
                title_chain("h1.text-3xl", 'h1[class*="title"]', site_suffixes=(" - MangaDex",)),
                description_chain('[class*="description"]', ".text-sm.leading-relaxed", prefer_meta=False),
                cover_chain('img[alt*="cover"]', ".rounded.shadow-md"),
                text_chain("author", 'a[href*="/author/"]'),
                text_chain("artist", 'a[href*="/artist/"]'),
                genres_chain('a[href*="/tag/"]'),
                status_chain('[class*="status"]'),
                source_url_chain(),
            ),
        )
