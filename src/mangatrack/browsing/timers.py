"""Resettable one-shot timers for settle delays and debounce windows."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable


LOGGER = logging.getLogger(__name__)


class ResettableTimer:
    """Run ``callback`` once after ``delay_seconds`` of quiet.

    Scheduling again before the delay elapses cancels the pending run, so only
    the arguments of the most recent :meth:`schedule` call are ever delivered.
    """

    def __init__(self, delay_seconds: float, callback: Callable[..., Any], *, name: str = "timer") -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds cannot be negative")
        self._delay_seconds = delay_seconds
        self._callback = callback
        self._name = name
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def delay_seconds(self) -> float:
        return self._delay_seconds

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule(self, *args: Any) -> None:
        with self._lock:
            existing = self._timer
            timer = threading.Timer(self._delay_seconds, self._fire, args=args)
            timer.daemon = True
            self._timer = timer
        if existing is not None:
            existing.cancel()
        timer.start()

    def cancel(self) -> bool:
        """Drop the pending run; returns True when one was pending."""

        with self._lock:
            timer = self._timer
            self._timer = None
        if timer is None:
            return False
        timer.cancel()
        return True

    def _fire(self, *args: Any) -> None:
        current = threading.current_thread()
        with self._lock:
            # A reschedule may have replaced this timer after it started running.
            if self._timer is not current:
                return
            self._timer = None
        try:
            self._callback(*args)
        except Exception:  # pragma: no cover
            LOGGER.exception("%s callback failed", self._name)
