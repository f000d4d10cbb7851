"""Debounced reading-progress write-back.

Page turns inside a reader fire many URL changes in quick succession; only
the URL the user settles on is written to the library.
"""

from __future__ import annotations

import logging
from typing import Callable

from mangatrack.browsing.timers import ResettableTimer
from mangatrack.chapters import extract_chapter_number
from mangatrack.config import DEFAULT_PROGRESS_DEBOUNCE_SECONDS, MangaTrackSettings
from mangatrack.library.client import LibraryBackend, LibraryRequestError, ProgressUpdate


LOGGER = logging.getLogger(__name__)


class ProgressTracker:
    def __init__(
        self,
        library: LibraryBackend,
        entry_id: str | None = None,
        *,
        debounce_seconds: float = DEFAULT_PROGRESS_DEBOUNCE_SECONDS,
        on_error: Callable[[LibraryRequestError], None] | None = None,
    ) -> None:
        self._library = library
        self._entry_id = entry_id
        self._on_error = on_error
        self._timer = ResettableTimer(debounce_seconds, self._commit, name="progress")
        self.last_update: ProgressUpdate | None = None

    @classmethod
    def from_settings(
        cls,
        library: LibraryBackend,
        settings: MangaTrackSettings,
        entry_id: str | None = None,
        *,
        on_error: Callable[[LibraryRequestError], None] | None = None,
    ) -> "ProgressTracker":
        """Tracker whose debounce window is ``settings.progress_debounce_seconds``."""

        return cls(library, entry_id, debounce_seconds=settings.progress_debounce_seconds, on_error=on_error)

    @property
    def entry_id(self) -> str | None:
        return self._entry_id

    def track(self, entry_id: str | None) -> None:
        """Switch the library entry receiving progress; pending writes are dropped."""

        self._timer.cancel()
        self._entry_id = entry_id

    def on_url_changed(self, url: str, title: str | None = None) -> None:
        if not self._entry_id or not url:
            return
        self._timer.schedule(self._entry_id, url, title)

    def _commit(self, entry_id: str, url: str, title: str | None) -> None:
        chapter = extract_chapter_number(url, title)
        if chapter is None:
            LOGGER.debug("No chapter in %s, progress unchanged", url)
            return

        update = ProgressUpdate(last_read_url=url, current_chapter=chapter, status="reading")
        try:
            self._library.update_progress(entry_id, update)
        except LibraryRequestError as exc:
            LOGGER.warning("Failed to update progress for %s: %s", entry_id, exc)
            if self._on_error is not None:
                self._on_error(exc)
            return

        self.last_update = update
        LOGGER.info("Progress updated: entry=%s chapter=%s", entry_id, chapter)

    def close(self) -> None:
        self._timer.cancel()
