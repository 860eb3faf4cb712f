"""
projects_api/rate_limit.py

Fixed-window, in-memory rate limiting keyed by client address.

Limitation: counters live in this process only. Several workers or
instances each keep their own window, and clients behind a proxy that
does not forward a stable address share one key.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

log = logging.getLogger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitStatus:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(math.ceil(self.reset_at)),
        }


class RateLimiter:
    """Counts hits per key inside a window that restarts once it expires."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        sweep_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.sweep_seconds = sweep_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, _Window] = {}
        self._last_sweep = clock()

    def hit(self, key: str) -> RateLimitStatus:
        with self._lock:
            now = self._clock()
            self._sweep(now)

            window = self._windows.get(key)
            if window is None or now > window.reset_at:
                window = _Window(count=0, reset_at=now + self.window_seconds)
                self._windows[key] = window
            window.count += 1

            allowed = window.count <= self.max_requests
            if not allowed:
                log.warning("[RATE_LIMIT] Limit exceeded: key=%s count=%d", key, window.count)
            return RateLimitStatus(
                allowed=allowed,
                limit=self.max_requests,
                remaining=max(0, self.max_requests - window.count),
                reset_at=window.reset_at,
            )

    def _sweep(self, now: float) -> None:
        # Caller holds the lock
        if now - self._last_sweep < self.sweep_seconds:
            return
        expired = [key for key, window in self._windows.items() if now > window.reset_at]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep = self._clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
