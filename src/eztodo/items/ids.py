# src/eztodo/items/ids.py

from __future__ import annotations

import threading
import time


class MonotonicIdGenerator:
    """
    Time-based id tokens that never repeat within a process.

    Tokens are millisecond timestamps; when the clock has not advanced (or went
    backwards) since the previous token, the previous value + 1 is used instead.
    """

    def __init__(self, prefix: str = "", *, clock_ms=None) -> None:
        self._prefix = prefix
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = max(int(self._clock_ms()), self._last + 1)
            self._last = value
        return f"{self._prefix}{value}"
