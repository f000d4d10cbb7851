from __future__ import annotations

import json
import shutil
import subprocess
from typing import Any

import pytest

from mangatrack.extraction.engine import run_program
from mangatrack.extraction.javascript import render_program
from mangatrack.extraction.strategies import (
    FieldChain,
    LabeledText,
    ScrapingProgram,
    cover_chain,
    description_chain,
    genres_chain,
    source_url_chain,
    status_chain,
    text_chain,
    title_chain,
)
from mangatrack.text import normalize_whitespace


PAGE_FIXTURE: dict[str, Any] = {
    "url": "https://www.webtoons.com/en/fantasy/tower-of-god/list?title_no=95#episodes",
    "title": "Tower of God | WEBTOON",
    "elements": {
        "h1": [{"textContent": "Summary"}, {"textContent": "  Tower   of God "}],
        'meta[property="og:description"]': [
            {"content": "A boy enters the tower to chase the girl he loves."}
        ],
        "img": [
            {"src": "https://x/logo.png", "alt": "site logo", "width": 300, "height": 400},
            {"src": "https://x/cover.jpg", "alt": "Tower of God cover", "width": 100, "height": 100},
        ],
        ".genres a": [{"textContent": "Fantasy,"}, {"textContent": "fantasy"}, {"textContent": "Drama"}],
        ".status": [{"textContent": "COMPLETED"}],
        ".info li": [{"textContent": "Views: 1M"}, {"textContent": "Artist: SIU"}],
    },
}

PROGRAM = ScrapingProgram(
    site="Webtoons",
    fields=(
        title_chain(".title"),
        description_chain(".summary"),
        cover_chain(),
        text_chain("author", ".author"),
        FieldChain("artist", (LabeledText(".info li", "artist"),)),
        genres_chain(".genres a"),
        status_chain(".status"),
        source_url_chain(canonical_suffix="/list"),
    ),
)

EXPECTED = {
    "title": "Tower of God",
    "description": "A boy enters the tower to chase the girl he loves.",
    "coverImage": "https://x/cover.jpg",
    "artist": "SIU",
    "genres": ["Fantasy", "Drama"],
    "mangaStatus": "completed",
    "sourceUrl": "https://www.webtoons.com/en/fantasy/tower-of-god/list",
    "sourceWebsite": "Webtoons",
}

# Minimal DOM: selectors resolve to the fixture lists above.
_NODE_HARNESS = """
var fixture = {fixture};
var window = {{ location: {{ href: fixture.url }} }};
var document = {{
  title: fixture.title,
  querySelectorAll: function(selector) {{ return fixture.elements[selector] || []; }},
  querySelector: function(selector) {{ return (fixture.elements[selector] || [])[0] || null; }}
}};
process.stdout.write({script});
"""


class _FixtureElement:
    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    @property
    def text(self) -> str:
        return normalize_whitespace(str(self._data.get("textContent", "")))

    def attr(self, name: str) -> str:
        return str(self._data.get(name, ""))

    @property
    def src(self) -> str:
        return self.attr("src")

    @property
    def width(self) -> int:
        return int(self._data.get("width", 0))

    @property
    def height(self) -> int:
        return int(self._data.get("height", 0))


class _FixturePage:
    def __init__(self, fixture: dict[str, Any]) -> None:
        self._fixture = fixture

    @property
    def url(self) -> str:
        return self._fixture["url"]

    @property
    def title(self) -> str:
        return self._fixture["title"]

    def select(self, selector: str) -> list[_FixtureElement]:
        return [_FixtureElement(item) for item in self._fixture["elements"].get(selector, [])]

    def meta(self, name: str) -> str:
        for attribute in ("property", "name"):
            for item in self._fixture["elements"].get(f'meta[{attribute}="{name}"]', []):
                content = normalize_whitespace(str(item.get("content", "")))
                if content:
                    return content
        return ""


def test_python_engine_on_fixture_page() -> None:
    assert run_program(PROGRAM, _FixturePage(PAGE_FIXTURE)) == EXPECTED


@pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")
def test_browser_runtime_matches_python_engine() -> None:
    harness = _NODE_HARNESS.format(fixture=json.dumps(PAGE_FIXTURE), script=render_program(PROGRAM))

    completed = subprocess.run(
        ["node"],
        input=harness,
        capture_output=True,
        text=True,
        timeout=30,
        check=True,
    )

    assert json.loads(completed.stdout) == run_program(PROGRAM, _FixturePage(PAGE_FIXTURE))
