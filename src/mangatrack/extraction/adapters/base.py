"""Shared adapter contract for per-site metadata extractors."""

from __future__ import annotations

import re
from typing import Any, Mapping, Pattern, Protocol, Sequence, runtime_checkable

from mangatrack.extraction.models import REQUIRED_FIELDS, ValidationResult
from mangatrack.extraction.strategies import ScrapingProgram

_CHAPTER_PAGE_RE = re.compile(r"/(?:chapter|ch|episode|ep|read)/\d+", re.IGNORECASE)
_TRAILING_CHAPTER_RE = re.compile(
    r"/(?:chapter|ch|episode|ep|read)[/-]\d+(?:\.\d+)?/?(?:[?#].*)?$",
    re.IGNORECASE,
)


@runtime_checkable
class SiteAdapter(Protocol):
    """Protocol that every site adapter must implement."""

    def get_name(self) -> str:
        """Stable identifier, echoed as ``sourceWebsite``."""

    def get_url_patterns(self) -> Sequence[Pattern[str]]:
        """Patterns recognizing this site's URLs, in evaluation order."""

    def can_handle(self, url: str) -> bool: ...

    def get_injection_script(self) -> ScrapingProgram:
        """Program that scrapes a detail page of this site."""

    def is_chapter_page(self, url: str) -> bool: ...

    def is_detail_page(self, url: str) -> bool: ...

    def get_series_url_from_chapter(self, chapter_url: str) -> str | None: ...

    def validate_metadata(self, data: Mapping[str, Any]) -> ValidationResult: ...


class BaseSiteAdapter:
    """Default behaviour shared by the concrete adapters.

    Subclasses set ``name`` and ``url_patterns`` and implement
    :meth:`build_program`; everything else may be overridden when a site's
    URL layout differs from the common one.
    """

    name: str = ""
    url_patterns: tuple[str, ...] = ()

    def __init__(self) -> None:
        if not self.name:
            raise ValueError(f"{type(self).__name__} must define a name")
        self._patterns = tuple(re.compile(pattern, re.IGNORECASE) for pattern in self.url_patterns)
        self._program = self.build_program()

    def build_program(self) -> ScrapingProgram:
        raise NotImplementedError

    def get_name(self) -> str:
        return self.name

    def get_url_patterns(self) -> tuple[Pattern[str], ...]:
        return self._patterns

    def can_handle(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in self._patterns)

    def get_injection_script(self) -> ScrapingProgram:
        return self._program

    def is_chapter_page(self, url: str) -> bool:
        return bool(_CHAPTER_PAGE_RE.search(url))

    def is_detail_page(self, url: str) -> bool:
        return self.can_handle(url) and not self.is_chapter_page(url)

    def get_series_url_from_chapter(self, chapter_url: str) -> str | None:
        match = _TRAILING_CHAPTER_RE.search(chapter_url)
        if match is None:
            return None
        series_url = chapter_url[: match.start()]
        return series_url or None

    def validate_metadata(self, data: Mapping[str, Any]) -> ValidationResult:
        errors = [f"Missing required field: {name}" for name in REQUIRED_FIELDS if not data.get(name)]
        if data.get("sourceWebsite") and data.get("sourceWebsite") != self.name:
            errors.append(f"sourceWebsite mismatch: expected {self.name}, got {data.get('sourceWebsite')}")
        return ValidationResult(is_valid=not errors, errors=errors)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
