"""Last-traffic timestamp used to detect stale connections."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class LivenessMarker:
    """Monotonic timestamp of the last inbound frame, safe across threads."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last_seen: Optional[float] = None

    def touch(self) -> None:
        now = self._clock()
        with self._lock:
            self._last_seen = now

    def clear(self) -> None:
        with self._lock:
            self._last_seen = None

    @property
    def is_set(self) -> bool:
        with self._lock:
            return self._last_seen is not None

    def age(self) -> Optional[float]:
        """Seconds since the last frame, or ``None`` when unset."""

        with self._lock:
            last_seen = self._last_seen
        if last_seen is None:
            return None
        return self._clock() - last_seen

    def is_stale(self, threshold: float) -> bool:
        age = self.age()
        return age is not None and age > threshold

    def describe(self) -> str:
        age = self.age()
        return "never" if age is None else f"{age:.1f}s ago"
