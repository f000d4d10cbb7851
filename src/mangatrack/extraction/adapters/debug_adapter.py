"""Selector probe used while writing a new adapter.

Matches every URL and reports what each candidate selector finds instead of
metadata. Not registered unless explicitly requested.
"""

from __future__ import annotations

from mangatrack.extraction.adapters.base import BaseSiteAdapter
from mangatrack.extraction.strategies import (
    FieldChain,
    MetaContent,
    ScrapingProgram,
    SelectImage,
    SelectText,
    SelectTextList,
)


class DebugAdapter(BaseSiteAdapter):
    name = "Debug"
    url_patterns = (r".*",)

    def build_program(self) -> ScrapingProgram:
        return ScrapingProgram(
            site=self.name,
            debug=True,
            fields=(
                FieldChain(
                    "title",
                    tuple(
                        SelectText(selector)
                        for selector in (
                            "h1",
                            "h1.title",
                            "h1.entry-title",
                            "h1.post-title",
                            "h1.name",
                            "h1.subj",
                            '[class*="title"]',
                            ".series-title",
                            ".manga-title",
                            ".comic-title",
                        )
                    )
                    + (MetaContent(("og:title",)),),
                ),
                FieldChain(
                    "description",
                    tuple(
                        SelectText(selector)
                        for selector in (
                            ".description",
                            ".summary",
                            ".synopsis",
                            '[class*="desc"]',
                            '[class*="summary"]',
                            ".content p",
                            '[itemprop="description"]',
                        )
                    ),
                    max_length=100,
                ),
                FieldChain(
                    "coverImage",
                    (SelectImage('img[class*="cover"]'), SelectImage('img[alt*="cover"]'), MetaContent(("og:image",))),
                    kind="image",
                ),
                FieldChain(
                    "author",
                    tuple(SelectText(selector) for selector in (".author", '[class*="author"]', '[itemprop="author"]')),
                ),
                FieldChain(
                    "genres",
                    tuple(
                        SelectTextList(selector)
                        for selector in (".genres a", ".genre a", 'a[href*="genre"]', '[class*="genre"] a', ".badge", ".tag")
                    ),
                    kind="list",
                    limit=5,
                ),
                FieldChain(
                    "mangaStatus",
                    tuple(
                        SelectText(selector)
                        for selector in (".status", '[class*="status"]', ".info-status", "[data-status]")
                    ),
                    kind="status",
                ),
            ),
        )

    def is_chapter_page(self, url: str) -> bool:
        return False
