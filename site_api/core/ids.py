from __future__ import annotations

import threading
import time
from typing import Callable


def _now_ms() -> int:
    return int(time.time() * 1000)


class IdGenerator:
    """
    Issues time-ordered string ids from a millisecond clock.

    The clock is clamped so it never goes backwards; ids issued within the same
    millisecond get a "-<seq>" suffix ("1700000000000", "1700000000000-1", ...).
    """

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._last_ms = 0
        self._seq = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now = max(self._clock(), self._last_ms)
            if now == self._last_ms:
                self._seq += 1
            else:
                self._last_ms = now
                self._seq = 0
            if self._seq:
                return f"{now}-{self._seq}"
            return str(now)
