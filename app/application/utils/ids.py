from __future__ import annotations

import threading
import time


class MonotonicIdGenerator:
    """Millisecond timestamps, bumped so every id is strictly greater than the last one issued."""

    def __init__(self, last_id: int = 0) -> None:
        self._last_id = last_id
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            candidate = int(time.time() * 1000)
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
            return candidate
