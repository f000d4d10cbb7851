"""REST client for the library backend that stores saved manga and progress."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Protocol

import requests

from mangatrack.config import MangaTrackSettings
from mangatrack.extraction.models import ExtractedMetadata


LOGGER = logging.getLogger(__name__)

READING_STATUSES = ("reading", "plan-to-read", "completed", "on-hold", "dropped")


@dataclass(slots=True)
class LibraryRequestError(RuntimeError):
    """Domain error raised for failed library API calls or invalid responses."""

    operation: str
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        return f"{self.message} (operation={self.operation}, status={self.status_code})"


@dataclass(frozen=True, slots=True)
class ProgressUpdate:
    """Reading position written back after the user settles on a chapter."""

    last_read_url: str
    current_chapter: str
    status: str = "reading"

    def to_dict(self) -> dict[str, str]:
        return {
            "lastReadUrl": self.last_read_url,
            "currentChapter": self.current_chapter,
            "status": self.status,
        }


class LibraryBackend(Protocol):
    """Persistence collaborator used by the save and progress flows."""

    def add_entry(self, metadata: ExtractedMetadata, category_id: str) -> dict[str, Any]: ...

    def update_progress(self, entry_id: str, update: ProgressUpdate) -> dict[str, Any]: ...


class LibraryClient:
    """``requests`` wrapper for the library endpoints. Calls are never retried."""

    def __init__(
        self,
        settings: MangaTrackSettings,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.api_token:
            headers["Authorization"] = f"Bearer {self._settings.api_token}"
        return headers

    def _request(self, operation: str, method: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._settings.api_base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                json=payload,
                headers=self._headers(),
                timeout=self._settings.request_timeout_seconds,
            )
        except requests.RequestException as exc:
            raise LibraryRequestError(operation=operation, message=f"Request to {url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise LibraryRequestError(
                operation=operation,
                message=f"Library API rejected request: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise LibraryRequestError(
                operation=operation,
                message="Library API returned invalid JSON",
                status_code=response.status_code,
            ) from exc

        entry = body.get("userManga") if isinstance(body, dict) else None
        if not isinstance(entry, dict):
            raise LibraryRequestError(
                operation=operation,
                message="Library API response missing 'userManga'",
                status_code=response.status_code,
            )
        return entry

    def add_entry(self, metadata: ExtractedMetadata, category_id: str) -> dict[str, Any]:
        if not category_id.strip():
            raise ValueError("category_id cannot be empty")

        payload = metadata.to_dict()
        payload["categoryId"] = category_id
        entry = self._request("add_entry", "POST", "/library", payload)
        LOGGER.info("Added %s to library category %s", metadata.title, category_id)
        return entry

    def update_progress(self, entry_id: str, update: ProgressUpdate) -> dict[str, Any]:
        if not entry_id.strip():
            raise ValueError("entry_id cannot be empty")
        if update.status not in READING_STATUSES:
            raise ValueError(f"Unknown reading status: {update.status}")

        entry = self._request("update_progress", "PUT", f"/library/{entry_id}/progress", update.to_dict())
        LOGGER.info("Progress for %s set to chapter %s", entry_id, update.current_chapter)
        return entry
