"""Restartable one-shot timers with pending state and synchronous stop."""

from __future__ import annotations

import random
import threading
from typing import Callable

__all__ = ["Timer", "jitter"]


class Timer:
    """A one-shot timer that may be rearmed, cancelled, or cancelled synchronously.

    The callback runs on a timer thread only if the timer is still pending
    when it expires.
    """

    def __init__(self, callback: Callable[[], object]) -> None:
        self._callback = callback
        self._modifying = threading.Lock()
        self._running = threading.Lock()
        self._pending = False
        self._timer: threading.Timer | None = None

    def _fire(self) -> None:
        with self._running:
            with self._modifying:
                if not self._pending:
                    return
                self._pending = False
            self._callback()

    def _stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def mod(self, delay: float) -> None:
        """(Re)arm the timer to expire ``delay`` seconds from now."""
        with self._modifying:
            self._pending = True
            self._stop()
            timer = threading.Timer(max(delay, 0.0), self._fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def delete(self) -> None:
        """Cancel the timer; a callback already running is not waited for."""
        with self._modifying:
            self._pending = False
            self._stop()

    def delete_sync(self) -> None:
        """Cancel the timer and wait for any running callback to finish."""
        self.delete()
        with self._running:
            self.delete()

    def is_pending(self) -> bool:
        """Whether the timer is armed and has not yet fired."""
        with self._modifying:
            return self._pending


def jitter(base: float, max_ms: int) -> float:
    """``base`` seconds plus a random whole number of milliseconds below ``max_ms``."""
    if max_ms < 0:
        raise ValueError("max_ms must not be negative")
    if max_ms == 0:
        return base
    return base + random.randrange(max_ms) / 1000