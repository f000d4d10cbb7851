"""Runtime configuration for the browsing session and library client."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping


DEFAULT_API_BASE_URL = "http://localhost:3000/api"
# Client-rendered series pages need a moment before their DOM is populated.
DEFAULT_SETTLE_DELAY_SECONDS = 3.5
DEFAULT_PROGRESS_DEBOUNCE_SECONDS = 2.0
DEFAULT_MANUAL_WAIT_SECONDS = 1.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class MangaTrackSettings:
    """Validated settings shared by the session, progress tracker and API client."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: str | None = None
    settle_delay_seconds: float = DEFAULT_SETTLE_DELAY_SECONDS
    progress_debounce_seconds: float = DEFAULT_PROGRESS_DEBOUNCE_SECONDS
    manual_wait_seconds: float = DEFAULT_MANUAL_WAIT_SECONDS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MangaTrackSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        base_url = source.get("MANGATRACK_API_BASE_URL", DEFAULT_API_BASE_URL).strip()
        if not base_url:
            raise ValueError("MANGATRACK_API_BASE_URL cannot be empty")
        if not (base_url.startswith("http://") or base_url.startswith("https://")):
            raise ValueError("MANGATRACK_API_BASE_URL must start with http:// or https://")

        token = source.get("MANGATRACK_API_TOKEN", "").strip() or None

        durations = {
            "MANGATRACK_SETTLE_DELAY_SECONDS": DEFAULT_SETTLE_DELAY_SECONDS,
            "MANGATRACK_PROGRESS_DEBOUNCE_SECONDS": DEFAULT_PROGRESS_DEBOUNCE_SECONDS,
            "MANGATRACK_MANUAL_WAIT_SECONDS": DEFAULT_MANUAL_WAIT_SECONDS,
            "MANGATRACK_REQUEST_TIMEOUT_SECONDS": DEFAULT_REQUEST_TIMEOUT_SECONDS,
        }
        parsed: dict[str, float] = {}
        for name, default in durations.items():
            raw_value = source.get(name, str(default)).strip()
            if not raw_value:
                raise ValueError(f"{name} cannot be empty")
            parsed[name] = _parse_positive_float(name=name, raw_value=raw_value)

        return cls(
            api_base_url=base_url.rstrip("/"),
            api_token=token,
            settle_delay_seconds=parsed["MANGATRACK_SETTLE_DELAY_SECONDS"],
            progress_debounce_seconds=parsed["MANGATRACK_PROGRESS_DEBOUNCE_SECONDS"],
            manual_wait_seconds=parsed["MANGATRACK_MANUAL_WAIT_SECONDS"],
            request_timeout_seconds=parsed["MANGATRACK_REQUEST_TIMEOUT_SECONDS"],
        )
