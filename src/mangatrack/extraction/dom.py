"""Read-only DOM view consumed by the scraping engine."""

from __future__ import annotations

from typing import Protocol, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from mangatrack.text import normalize_whitespace


class PageElement(Protocol):
    """Minimal element surface the engine relies on."""

    @property
    def text(self) -> str:
        """Whitespace-normalized text content."""

    def attr(self, name: str) -> str:
        """Attribute value, or an empty string when absent."""

    @property
    def src(self) -> str:
        """Absolute image source."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...


class PageDocument(Protocol):
    """A loaded page: its location, title and CSS query access."""

    @property
    def url(self) -> str: ...

    @property
    def title(self) -> str: ...

    def select(self, selector: str) -> Sequence[PageElement]:
        """All elements matching a CSS selector, in document order."""

    def meta(self, name: str) -> str:
        """Content of ``<meta property=name>`` or ``<meta name=name>``."""


def _dimension(raw: str | None) -> int:
    if not raw:
        return 0
    digits = "".join(ch for ch in str(raw) if ch.isdigit() or ch == ".")
    try:
        return int(float(digits)) if digits else 0
    except ValueError:
        return 0


class SoupElement:
    """BeautifulSoup tag adapted to :class:`PageElement`."""

    __slots__ = ("_tag", "_base_url")

    def __init__(self, tag: Tag, base_url: str) -> None:
        self._tag = tag
        self._base_url = base_url

    @property
    def text(self) -> str:
        return normalize_whitespace(self._tag.get_text(" ", strip=True))

    def attr(self, name: str) -> str:
        value = self._tag.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @property
    def src(self) -> str:
        raw = self.attr("src") or self.attr("data-src")
        if not raw:
            return ""
        return urljoin(self._base_url, raw.strip())

    @property
    def width(self) -> int:
        return _dimension(self.attr("width"))

    @property
    def height(self) -> int:
        return _dimension(self.attr("height"))


class SoupPage:
    """Static HTML page parsed with BeautifulSoup + lxml."""

    def __init__(self, html: str | bytes, url: str) -> None:
        self._soup = BeautifulSoup(html, "lxml")
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    @property
    def title(self) -> str:
        if self._soup.title is None:
            return ""
        return normalize_whitespace(self._soup.title.get_text(" ", strip=True))

    def select(self, selector: str) -> list[SoupElement]:
        return [SoupElement(tag, self._url) for tag in self._soup.select(selector)]

    def meta(self, name: str) -> str:
        for attribute in ("property", "name"):
            tag = self._soup.find("meta", attrs={attribute: name})
            if isinstance(tag, Tag):
                content = tag.get("content")
                if content:
                    return normalize_whitespace(str(content))
        return ""
