from __future__ import annotations

import time
import uuid
from threading import Lock
from typing import Callable

Clock = Callable[[], int]
IdGenerator = Callable[[], str]


# PUBLIC_INTERFACE
def new_todo_id() -> str:
    """Return a fresh random identifier (UUID4 string) for a to-do record."""
    return str(uuid.uuid4())


# PUBLIC_INTERFACE
class MonotonicClock:
    """
    Nanosecond wall-clock timestamps that never go backwards.

    time.time_ns() can step back when the system clock is adjusted; the last
    value handed out is kept so that every reading is >= the previous one.
    """

    def __init__(self, source: Callable[[], int] = time.time_ns) -> None:
        self._source = source
        self._last = 0
        self._lock = Lock()

    def __call__(self) -> int:
        with self._lock:
            now = self._source()
            if now < self._last:
                now = self._last
            self._last = now
            return now
