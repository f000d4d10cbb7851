"""Per-page-viewer coordination of navigation, extraction and saving.

Injection is fire-and-forget: results come back later through
:meth:`BrowserSession.on_message` with no request correlation, and each valid
message replaces the latest-metadata slot wholesale. The manual trigger waits
a bounded window for a fresh message; a reply arriving later still lands in
the slot but is not reported to that caller.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import logging
import threading
from typing import Any, Mapping, Protocol

from mangatrack.browsing.progress import ProgressTracker
from mangatrack.browsing.timers import ResettableTimer
from mangatrack.config import MangaTrackSettings
from mangatrack.extraction.engine import normalize_source_url
from mangatrack.extraction.models import ExtractedMetadata
from mangatrack.extraction.sandbox import PageSandbox
from mangatrack.extraction.service import MetadataService
from mangatrack.library.client import LibraryBackend


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class NavigationState:
    url: str = ""
    can_go_back: bool = False
    can_go_forward: bool = False
    loading: bool = False

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> "NavigationState":
        """Build from a host navigation event using its camelCase keys."""

        return cls(
            url=str(event.get("url") or ""),
            can_go_back=bool(event.get("canGoBack", False)),
            can_go_forward=bool(event.get("canGoForward", False)),
            loading=bool(event.get("loading", False)),
        )


class ExtractionOutcome(Enum):
    EXTRACTED = "extracted"
    NO_PAGE = "no_page"
    UNSUPPORTED_WEBSITE = "unsupported_website"
    NOT_DETAIL_PAGE = "not_detail_page"
    REDIRECTED = "redirected"          # host sent to the series page, retry once it loads
    NO_SCRIPT = "no_script"
    INJECTION_FAILED = "injection_failed"
    NO_REPLY = "no_reply"              # wait window elapsed without a fresh message


@dataclass(slots=True)
class ManualExtractionResult:
    outcome: ExtractionOutcome
    metadata: ExtractedMetadata | None = None
    series_url: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is ExtractionOutcome.EXTRACTED


class PageHost(Protocol):
    """Navigation controls of the embedded page viewer."""

    def navigate(self, url: str) -> None: ...

    def go_back(self) -> None: ...

    def go_forward(self) -> None: ...

    def reload(self) -> None: ...


class BrowserSession:
    """State machine behind one page-viewer screen."""

    def __init__(
        self,
        service: MetadataService,
        sandbox: PageSandbox,
        *,
        settings: MangaTrackSettings | None = None,
        host: PageHost | None = None,
        library: LibraryBackend | None = None,
        progress: ProgressTracker | None = None,
    ) -> None:
        self._settings = settings or MangaTrackSettings()
        self._service = service
        self._sandbox = sandbox
        self._host = host
        self._library = library
        if progress is None and library is not None:
            progress = ProgressTracker.from_settings(library, self._settings)
        self._progress = progress

        self._state = NavigationState()
        self._overlay_visible = False
        self._latest: ExtractedMetadata | None = None
        self._generation = 0
        self._condition = threading.Condition()
        self._lock = threading.Lock()
        self._auto_timer = ResettableTimer(
            self._settings.settle_delay_seconds,
            self._auto_extract,
            name="auto-extraction",
        )

        self._sandbox.set_message_handler(self.on_message)

    @property
    def state(self) -> NavigationState:
        with self._lock:
            return replace(self._state)

    @property
    def current_url(self) -> str:
        with self._lock:
            return self._state.url

    @property
    def extracted_metadata(self) -> ExtractedMetadata | None:
        with self._condition:
            return self._latest

    @property
    def overlay_visible(self) -> bool:
        return self._overlay_visible

    @property
    def progress(self) -> ProgressTracker | None:
        return self._progress

    @property
    def auto_extraction_pending(self) -> bool:
        return self._auto_timer.pending

    # -- host callbacks -------------------------------------------------

    def on_navigation_state_change(self, state: NavigationState | Mapping[str, Any]) -> None:
        if not isinstance(state, NavigationState):
            state = NavigationState.from_event(state)

        with self._lock:
            self._state = state

        if self._progress is not None and state.url:
            self._progress.on_url_changed(state.url)

        self._schedule_auto_extraction(state.url)

    def on_load_start(self) -> None:
        with self._lock:
            self._state.loading = True

    def on_load_end(self) -> None:
        with self._lock:
            self._state.loading = False

    def on_message(self, raw_message: str) -> ExtractedMetadata | None:
        metadata = self._service.parse_and_validate(raw_message)
        if metadata is None:
            return None

        with self._condition:
            self._latest = metadata
            self._generation += 1
            self._condition.notify_all()
        LOGGER.info("Extracted metadata: %s (%s)", metadata.title, metadata.source_website)
        return metadata

    # -- extraction -------------------------------------------------------

    def _schedule_auto_extraction(self, url: str) -> None:
        # Only the latest URL is ever extracted automatically.
        self._auto_timer.cancel()
        if not url or self._overlay_visible:
            return
        if not self._service.is_extractable(url):
            return
        if self._service.is_chapter_page(url):
            LOGGER.info("Reading %s, automatic extraction suppressed", url)
            return
        self._auto_timer.schedule(url)

    def _auto_extract(self, url: str) -> None:
        if url != self.current_url or self._overlay_visible:
            return
        self.extract_metadata(url)

    def extract_metadata(self, url: str, manual: bool = False) -> bool:
        """Inject the extraction script for ``url``; the result arrives via on_message."""

        return self._inject(url, manual=manual) is None

    def _inject(self, url: str, *, manual: bool) -> ExtractionOutcome | None:
        if self._service.get_extractor_for_url(url) is None:
            return ExtractionOutcome.UNSUPPORTED_WEBSITE

        payload = self._service.get_injection_script(url)
        if payload is None:
            return ExtractionOutcome.NO_SCRIPT

        try:
            self._sandbox.inject(payload)
        except Exception as exc:
            LOGGER.warning("Failed to inject extraction script (manual=%s) for %s: %s", manual, url, exc)
            return ExtractionOutcome.INJECTION_FAILED

        LOGGER.debug("Injected %s extraction script (manual=%s)", payload.adapter_name, manual)
        return None

    def _held_metadata_for(self, url: str) -> ExtractedMetadata | None:
        with self._condition:
            latest = self._latest
        if latest is None:
            return None
        if normalize_source_url(latest.source_url) != normalize_source_url(url):
            return None
        return latest

    def request_metadata(self) -> ManualExtractionResult:
        """User-initiated extraction with a bounded wait for the page's reply."""

        url = self.current_url
        if not url:
            return ManualExtractionResult(ExtractionOutcome.NO_PAGE)

        adapter = self._service.get_extractor_for_url(url)
        if adapter is None:
            LOGGER.warning("Unsupported website: %s", url)
            return ManualExtractionResult(ExtractionOutcome.UNSUPPORTED_WEBSITE)

        held = self._held_metadata_for(url)
        if held is not None:
            return ManualExtractionResult(ExtractionOutcome.EXTRACTED, metadata=held)

        if adapter.is_chapter_page(url):
            series_url = adapter.get_series_url_from_chapter(url)
            if series_url is None or self._host is None:
                return ManualExtractionResult(ExtractionOutcome.NOT_DETAIL_PAGE)
            LOGGER.info("Chapter page, redirecting to series page %s", series_url)
            self._host.navigate(series_url)
            return ManualExtractionResult(ExtractionOutcome.REDIRECTED, series_url=series_url)

        if not adapter.is_detail_page(url):
            return ManualExtractionResult(ExtractionOutcome.NOT_DETAIL_PAGE)

        with self._condition:
            generation = self._generation

        failure = self._inject(url, manual=True)
        if failure is not None:
            return ManualExtractionResult(failure)

        with self._condition:
            arrived = self._condition.wait_for(
                lambda: self._generation != generation,
                timeout=self._settings.manual_wait_seconds,
            )
            metadata = self._latest if arrived else None

        if metadata is None:
            LOGGER.info("No extraction reply within %.1fs for %s", self._settings.manual_wait_seconds, url)
            return ManualExtractionResult(ExtractionOutcome.NO_REPLY)
        return ManualExtractionResult(ExtractionOutcome.EXTRACTED, metadata=metadata)

    def clear_metadata(self) -> None:
        with self._condition:
            self._latest = None

    # -- library ----------------------------------------------------------

    def save_to_library(self, category_id: str) -> dict[str, Any]:
        """Add the held metadata to ``category_id``; backend errors propagate."""

        if self._library is None:
            raise RuntimeError("No library backend configured")
        metadata = self.extracted_metadata
        if metadata is None:
            raise ValueError("No extracted metadata to save")
        return self._library.add_entry(metadata, category_id)

    # -- viewer controls --------------------------------------------------

    def set_overlay_visible(self, visible: bool) -> None:
        self._overlay_visible = visible
        if visible:
            self._auto_timer.cancel()
        else:
            self._schedule_auto_extraction(self.current_url)

    def go_back(self) -> bool:
        if self._host is None or not self.state.can_go_back:
            return False
        self._host.go_back()
        return True

    def go_forward(self) -> bool:
        if self._host is None or not self.state.can_go_forward:
            return False
        self._host.go_forward()
        return True

    def reload(self) -> bool:
        if self._host is None:
            return False
        self._host.reload()
        return True

    def close(self) -> None:
        self._auto_timer.cancel()
        if self._progress is not None:
            self._progress.close()
        self._sandbox.set_message_handler(None)
