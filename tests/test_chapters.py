from __future__ import annotations

import pytest

from mangatrack.chapters import (
    calculate_progress,
    clean_manga_title,
    extract_chapter_number,
    format_chapter_display,
)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://asuracomic.net/series/swordmasters-youngest-son-b62b5a15/chapter/194", "194"),
        ("https://mangafire.to/read/solo-leveling.1pv7/en/chapter-150.5", "150.5"),
        ("https://mangafire.to/manga/solo-leveling.1pv7?chapter=150", "150"),
        ("https://example.com/read/abc/en/chapter12", "12"),
        ("https://example.com/show/ep/12", "12"),
        ("https://example.com/manga/foo/57", "57"),
        ("https://weebcentral.com/series/ABC123/My-Title", None),
        ("https://example.com/manga/123456", None),
        ("https://example.com/manga/0", None),
        ("", None),
    ],
)
def test_extract_chapter_number_from_url(url: str, expected: str | None) -> None:
    assert extract_chapter_number(url) == expected


def test_extract_chapter_number_falls_back_to_title() -> None:
    url = "https://weebcentral.com/chapters/01JABC"

    assert extract_chapter_number(url) is None
    assert extract_chapter_number(url, "Kagurabachi Chapter 108") == "108"
    assert extract_chapter_number(url, "Kagurabachi") is None


def test_url_number_wins_over_title() -> None:
    assert extract_chapter_number("https://x.com/chapter/7", "Chapter 9") == "7"


@pytest.mark.parametrize(
    "title,expected",
    [
        ("Swordmaster's Youngest Son Chapter 194 - Asura Scans", "Swordmaster's Youngest Son"),
        ("One Piece Ch. 1050", "One Piece"),
        ("Tower of God – Webtoons", "Tower of God"),
        ("Solo Leveling - mangafire", "Solo Leveling"),
        ("Kagurabachi | Weeb Central", "Kagurabachi"),
        ("Re:Zero - Starting Life in Another World", "Re:Zero - Starting Life in Another World"),
        ("", ""),
    ],
)
def test_clean_manga_title(title: str, expected: str) -> None:
    cleaned = clean_manga_title(title)

    assert cleaned == expected
    assert clean_manga_title(cleaned) == cleaned


def test_format_chapter_display() -> None:
    assert format_chapter_display(None) == "Not started"
    assert format_chapter_display("") == "Not started"
    assert format_chapter_display("0") == "Not started"
    assert format_chapter_display("194") == "Chapter 194"
    assert format_chapter_display(12) == "Chapter 12"


def test_calculate_progress_is_clamped() -> None:
    assert calculate_progress("50", 100) == 50
    assert calculate_progress(150, 100) == 100
    assert calculate_progress("abc", 10) == 0
    assert calculate_progress("nan", 10) == 0
    assert calculate_progress(5, None) == 0
    assert calculate_progress(5, 0) == 0
