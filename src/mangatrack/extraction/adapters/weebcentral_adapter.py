"""WeebCentral adapter.

Series pages expose little beyond the heading and Open Graph tags, so genres
and status fall back to fixed defaults.
"""

from __future__ import annotations

import re

from mangatrack.extraction.adapters.base import BaseSiteAdapter
from mangatrack.extraction.strategies import (
    BRANDING_TOKENS,
    FieldChain,
    ImageByAlt,
    LargeImage,
    MetaContent,
    ScrapingProgram,
    description_chain,
    genres_chain,
    source_url_chain,
    status_chain,
    title_chain,
)

_CHAPTER_RE = re.compile(r"/chapter/\d+", re.IGNORECASE)
_SERIES_RE = re.compile(r"(.*/series/[^/]+/[^/]+)/chapter/\d+", re.IGNORECASE)


class WeebCentralAdapter(BaseSiteAdapter):
    name = "WeebCentral"
    url_patterns = (r"weebcentral\.com/series", r"weebcentral\.com/manga")

    def build_program(self) -> ScrapingProgram:
        return ScrapingProgram(
            site=self.name,
            fields=(
                title_chain("h1", site_suffixes=(" | Weeb Central",)),
                description_chain(),
                FieldChain(
                    "coverImage",
                    (ImageByAlt(match_title=False), MetaContent(("og:image",)), LargeImage(200, 250)),
                    kind="image",
                    exclude_tokens=BRANDING_TOKENS,
                ),
                genres_chain(default=("Manga",)),
                status_chain(),
                source_url_chain(),
            ),
        )

    def is_chapter_page(self, url: str) -> bool:
        return bool(_CHAPTER_RE.search(url))

    def get_series_url_from_chapter(self, chapter_url: str) -> str | None:
        match = _SERIES_RE.match(chapter_url)
        return match.group(1) if match else None
