"""Execution boundary between the coordinator and a loaded page.

The coordinator only ever injects a payload and later receives strings on a
message handler. :class:`SoupPageSandbox` plays the page side for static HTML
(saved pages, tests, the CLI); a browser-backed host injects
``payload.source`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import threading
from typing import Callable, Protocol

from mangatrack.extraction.dom import SoupPage
from mangatrack.extraction.engine import run_program
from mangatrack.extraction.service import InjectionPayload


LOGGER = logging.getLogger(__name__)

MessageHandler = Callable[[str], None]


@dataclass(slots=True)
class SandboxError(RuntimeError):
    """Raised host-side when a payload cannot be injected."""

    message: str
    url: str | None = None

    def __str__(self) -> str:
        return f"{self.message} (url={self.url})"


class PageSandbox(Protocol):
    """Inject text into a page; receive string messages asynchronously."""

    def set_message_handler(self, handler: MessageHandler | None) -> None: ...

    def inject(self, payload: InjectionPayload) -> None: ...


class SoupPageSandbox:
    """Run scraping programs against static HTML parsed with BeautifulSoup."""

    def __init__(self, *, reply_delay_seconds: float | None = None) -> None:
        self._page: SoupPage | None = None
        self._handler: MessageHandler | None = None
        self._reply_delay_seconds = reply_delay_seconds
        self._timers: list[threading.Timer] = []
        self._lock = threading.Lock()

    @property
    def current_url(self) -> str | None:
        return self._page.url if self._page is not None else None

    def load(self, html: str | bytes, url: str) -> None:
        self._page = SoupPage(html, url)

    def unload(self) -> None:
        self._page = None

    def set_message_handler(self, handler: MessageHandler | None) -> None:
        self._handler = handler

    def execute(self, payload: InjectionPayload) -> str:
        """Run the payload the way the browser envelope does and return its result."""

        if self._page is None:
            raise SandboxError("No page loaded", url=payload.url)
        try:
            result = json.dumps(run_program(payload.program, self._page), ensure_ascii=False)
        except Exception as exc:
            LOGGER.warning("Page script failed for %s: %s", payload.url, exc)
            result = json.dumps({"error": str(exc) or type(exc).__name__})
        return result

    def inject(self, payload: InjectionPayload) -> None:
        result = self.execute(payload)
        if self._reply_delay_seconds is None:
            self._post(result)
            return

        timer = threading.Timer(self._reply_delay_seconds, self._post, args=(result,))
        timer.daemon = True
        with self._lock:
            self._timers = [pending for pending in self._timers if pending.is_alive()]
            self._timers.append(timer)
        timer.start()

    def _post(self, message: str) -> None:
        handler = self._handler
        if handler is None:
            LOGGER.debug("Dropping page message: no handler attached")
            return
        handler(message)

    def close(self) -> None:
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
