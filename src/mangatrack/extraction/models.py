"""Canonical data structures shared by all site adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, Mapping

MANGA_STATUSES = ("ongoing", "completed", "hiatus", "cancelled")
DEFAULT_MANGA_STATUS = "ongoing"
MAX_GENRES = 5
REQUIRED_FIELDS = ("title", "sourceUrl", "sourceWebsite")

# Wire payload markers for messages that never carry metadata.
DEBUG_MARKER = "_isDebugAdapter"
REDIRECT_MARKER = "_redirecting"


@dataclass(slots=True)
class ValidationResult:
    """Outcome of an adapter's metadata rule set."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # json.loads accepts Infinity, -Infinity and NaN literals.
    return number if math.isfinite(number) else None


def _optional_int(value: Any) -> int | None:
    number = _optional_float(value)
    return int(number) if number is not None else None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    items: list[str] = []
    for item in value:
        text = _optional_str(item)
        if text and text not in items:
            items.append(text)
    return items


@dataclass(slots=True)
class ExtractedMetadata:
    """Normalized manga metadata scraped from a series detail page."""

    title: str
    source_url: str
    source_website: str
    description: str | None = None
    author: str | None = None
    artist: str | None = None
    cover_image: str | None = None
    genres: list[str] = field(default_factory=list)
    manga_status: str | None = None
    total_chapters: int | None = None
    alternative_titles: list[str] = field(default_factory=list)
    last_chapter_added: str | None = None
    rating: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExtractedMetadata":
        """Build from a wire payload; raises ValueError when a required field is missing."""

        missing = [
            name
            for name in REQUIRED_FIELDS
            if not isinstance(data.get(name), str) or not data[name].strip()
        ]
        if missing:
            raise ValueError(f"Missing required metadata fields: {', '.join(missing)}")

        status = _optional_str(data.get("mangaStatus"))
        if status is not None:
            status = status.lower()
            if status not in MANGA_STATUSES:
                status = None

        return cls(
            title=str(data["title"]).strip(),
            source_url=str(data["sourceUrl"]).strip(),
            source_website=str(data["sourceWebsite"]).strip(),
            description=_optional_str(data.get("description")),
            author=_optional_str(data.get("author")),
            artist=_optional_str(data.get("artist")),
            cover_image=_optional_str(data.get("coverImage")),
            genres=_string_list(data.get("genres"))[:MAX_GENRES],
            manga_status=status,
            total_chapters=_optional_int(data.get("totalChapters")),
            alternative_titles=_string_list(data.get("alternativeTitles")),
            last_chapter_added=_optional_str(data.get("lastChapterAdded")),
            rating=_optional_float(data.get("rating")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to wire keys, omitting empty optional fields."""

        payload: dict[str, Any] = {
            "title": self.title,
            "sourceUrl": self.source_url,
            "sourceWebsite": self.source_website,
        }
        optional: dict[str, Any] = {
            "description": self.description,
            "author": self.author,
            "artist": self.artist,
            "coverImage": self.cover_image,
            "genres": list(self.genres),
            "mangaStatus": self.manga_status,
            "totalChapters": self.total_chapters,
            "alternativeTitles": list(self.alternative_titles),
            "lastChapterAdded": self.last_chapter_added,
            "rating": self.rating,
        }
        for key, value in optional.items():
            if value is None or value == []:
                continue
            payload[key] = value
        return payload
