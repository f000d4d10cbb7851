"""MangaKakalot / Manganato adapter.

Author and status live in ``Label : value`` info rows rather than in
dedicated elements.
"""

from __future__ import annotations

from mangatrack.extraction.adapters.base import BaseSiteAdapter
from mangatrack.extraction.strategies import (
    FieldChain,
    LabeledText,
    ScrapingProgram,
    cover_chain,
    description_chain,
    genres_chain,
    source_url_chain,
    title_chain,
)

_INFO_ROWS = ".manga-info-text li, .variations-tableInfo tr, .story-info-right-extent p"


class MangaKakalotAdapter(BaseSiteAdapter):
    name = "MangaKakalot"
    url_patterns = (r"mangakakalot\.com/manga", r"manganato\.com/manga")

    def build_program(self) -> ScrapingProgram:
        description = description_chain(
            "#noidungm",
            "#panel-story-info-description",
            ".panel-story-info-description",
            prefer_meta=False,
        )
        return ScrapingProgram(
            site=self.name,
            fields=(
                title_chain(".manga-info-text h1", ".story-info-right h1"),
                FieldChain(
                    description.name,
                    description.strategies,
                    max_length=500,
                    remove_words=("Description :", "Description:"),
                ),
                cover_chain(".manga-info-pic img", ".info-image img", "img.img-loading"),
                FieldChain("author", (LabeledText(_INFO_ROWS, "author"),)),
                genres_chain('.manga-info-text li a[href*="genre"]', ".table-value a"),
                FieldChain(
                    "mangaStatus",
                    (LabeledText(_INFO_ROWS, "status"),),
                    kind="status",
                    default="ongoing",
                ),
                source_url_chain(),
            ),
        )
