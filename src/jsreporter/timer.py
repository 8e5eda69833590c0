"""Elapsed-time measurement for a single suite or spec."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

NOT_STARTED = -1.0
"""Value returned by ``Timer.elapsed()`` when ``start()`` was never called."""


class Timer:
    """Measure milliseconds between ``start()`` and ``elapsed()``.

    Args:
        clock: Callable returning the current time in seconds.  Defaults
            to ``time.monotonic``.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self.started_at: float | None = None

    def start(self) -> Timer:
        """Capture the current time and return ``self``."""
        self.started_at = self._clock()
        return self

    def elapsed(self) -> float:
        """Return milliseconds since ``start()``, or ``-1`` if never started."""
        if self.started_at is None:
            return NOT_STARTED
        return (self._clock() - self.started_at) * 1000.0
