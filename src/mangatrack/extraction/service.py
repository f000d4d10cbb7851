"""Facade used by the page viewer to extract and validate manga metadata."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any

from mangatrack.extraction.adapters import SiteAdapter
from mangatrack.extraction.javascript import wrap_for_messaging
from mangatrack.extraction.models import DEBUG_MARKER, REDIRECT_MARKER, ExtractedMetadata
from mangatrack.extraction.registry import AdapterRegistry
from mangatrack.extraction.strategies import ScrapingProgram


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InjectionPayload:
    """A scraping program bound to the page it targets.

    ``source`` is the browser script: it runs the program, posts the JSON
    result back over the message channel and evaluates to that same string.
    """

    url: str
    adapter_name: str
    program: ScrapingProgram
    source: str

    def __str__(self) -> str:
        return self.source


class MetadataService:
    """Resolve adapters for URLs, build injection payloads and parse replies."""

    def __init__(self, registry: AdapterRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def get_extractor_for_url(self, url: str) -> SiteAdapter | None:
        if not isinstance(url, str):
            return None
        return self._registry.get_adapter_for_url(url)

    def get_adapter_by_name(self, name: str) -> SiteAdapter | None:
        return self._registry.get_adapter_by_name(name)

    def supported_websites(self) -> list[str]:
        return self._registry.supported_websites()

    def is_chapter_page(self, url: str) -> bool:
        adapter = self.get_extractor_for_url(url)
        return adapter is not None and adapter.is_chapter_page(url)

    def series_url_for(self, url: str) -> str | None:
        """Parent series page for a chapter URL, or None when not derivable."""

        adapter = self.get_extractor_for_url(url)
        if adapter is None or not adapter.is_chapter_page(url):
            return None
        return adapter.get_series_url_from_chapter(url)

    def is_extractable(self, url: str) -> bool:
        """True for detail pages and for chapter pages whose series page is known."""

        adapter = self.get_extractor_for_url(url)
        if adapter is None:
            return False
        if adapter.is_chapter_page(url):
            return adapter.get_series_url_from_chapter(url) is not None
        return adapter.is_detail_page(url)

    def get_injection_script(self, url: str) -> InjectionPayload | None:
        adapter = self.get_extractor_for_url(url)
        if adapter is None:
            LOGGER.warning("No adapter found for URL: %s", url)
            return None

        if adapter.is_chapter_page(url):
            LOGGER.info("Chapter page detected, skipping metadata extraction: %s", url)
            return None

        program = adapter.get_injection_script()
        return InjectionPayload(
            url=url,
            adapter_name=adapter.get_name(),
            program=program,
            source=wrap_for_messaging(program.to_javascript()),
        )

    def parse_and_validate(self, raw_message: Any) -> ExtractedMetadata | None:
        """Parse a page message; every failure yields None rather than an exception."""

        if not isinstance(raw_message, str) or not raw_message.strip():
            LOGGER.info("Ignoring empty or non-string page message")
            return None

        try:
            data = json.loads(raw_message)
        except (ValueError, RecursionError) as exc:
            LOGGER.info("Failed to parse page message as JSON: %s", exc)
            return None

        if not isinstance(data, dict):
            LOGGER.info("Ignoring page message that is not a JSON object")
            return None

        if data.get(DEBUG_MARKER):
            LOGGER.info("Debug adapter output:\n%s", json.dumps(data, indent=2, ensure_ascii=False))
            return None

        if data.get(REDIRECT_MARKER):
            LOGGER.info("%s", data.get("message") or "Redirecting to series page")
            return None

        if data.get("error"):
            LOGGER.info("Extraction error from page: %s", data.get("error"))
            return None

        try:
            metadata = ExtractedMetadata.from_dict(data)
        except ValueError as exc:
            LOGGER.info("Discarding extracted data: %s", exc)
            return None

        adapter = self.get_extractor_for_url(metadata.source_url)
        if adapter is not None:
            validation = adapter.validate_metadata(data)
            if not validation.is_valid:
                # Advisory only: the required fields above already passed.
                LOGGER.warning("Metadata validation issues for %s: %s", metadata.title, validation.errors)

        LOGGER.info("Parsed metadata for: %s", metadata.title)
        return metadata
