from __future__ import annotations

import json
import threading

import pytest

from mangatrack.extraction.registry import build_default_registry
from mangatrack.extraction.sandbox import SandboxError, SoupPageSandbox
from mangatrack.extraction.service import MetadataService


SERIES_URL = "https://weebcentral.com/series/ABC123/My-Title"
SERIES_HTML = (
    '<html><head><meta property="og:image" content="https://x/cover.jpg"></head>'
    "<body><h1>My Title</h1></body></html>"
)


def test_weebcentral_page_round_trip() -> None:
    service = MetadataService(build_default_registry())
    sandbox = SoupPageSandbox()
    messages: list[str] = []
    sandbox.set_message_handler(messages.append)
    sandbox.load(SERIES_HTML, SERIES_URL)

    payload = service.get_injection_script(SERIES_URL)
    assert payload is not None
    sandbox.inject(payload)

    assert len(messages) == 1
    assert json.loads(messages[0]) == {
        "title": "My Title",
        "coverImage": "https://x/cover.jpg",
        "genres": ["Manga"],
        "mangaStatus": "ongoing",
        "sourceUrl": SERIES_URL,
        "sourceWebsite": "WeebCentral",
    }

    metadata = service.parse_and_validate(messages[0])
    assert metadata is not None
    assert metadata.title == "My Title"
    assert metadata.cover_image == "https://x/cover.jpg"


def test_inject_without_page_raises() -> None:
    service = MetadataService(build_default_registry())
    sandbox = SoupPageSandbox()
    payload = service.get_injection_script(SERIES_URL)
    assert payload is not None

    with pytest.raises(SandboxError, match="No page loaded"):
        sandbox.inject(payload)


def test_delayed_reply_arrives_later() -> None:
    service = MetadataService(build_default_registry())
    sandbox = SoupPageSandbox(reply_delay_seconds=0.05)
    received = threading.Event()
    messages: list[str] = []

    def _handler(message: str) -> None:
        messages.append(message)
        received.set()

    sandbox.set_message_handler(_handler)
    sandbox.load(SERIES_HTML, SERIES_URL)
    payload = service.get_injection_script(SERIES_URL)
    assert payload is not None

    sandbox.inject(payload)
    assert messages == []
    assert received.wait(timeout=2.0) is True
    assert json.loads(messages[0])["title"] == "My Title"
    sandbox.close()


def test_messages_without_handler_are_dropped() -> None:
    service = MetadataService(build_default_registry())
    sandbox = SoupPageSandbox()
    sandbox.load(SERIES_HTML, SERIES_URL)
    payload = service.get_injection_script(SERIES_URL)
    assert payload is not None

    sandbox.inject(payload)

    assert json.loads(sandbox.execute(payload))["sourceWebsite"] == "WeebCentral"
