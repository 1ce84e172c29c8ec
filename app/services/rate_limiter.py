"""
Rate Limiter - fixed-window request counting per client.

Requests from one client key are grouped into clock-aligned windows of
`window_seconds`. Each request increments its window; once the count passes
`limit` the request is rejected until the next window starts.

Counters live in a keyed table. Each key maps onto one of a fixed set of
locks (lock striping) so increments for the same key are atomic while
unrelated clients do not contend on a single lock.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from app.core.settings import settings

logger = logging.getLogger(__name__)

LOCK_STRIPES = 64


@dataclass
class RateWindow:
    client_key: str
    window_start: float
    count: int = 0


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def retry_after(self, now: float) -> int:
        return max(0, int(self.reset_at - now + 0.999))


class FixedWindowRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, RateWindow] = {}
        self._stripes: List[threading.Lock] = [threading.Lock() for _ in range(LOCK_STRIPES)]
        self._sweep_lock = threading.Lock()
        self._last_sweep = clock()

    def now(self) -> float:
        return self._clock()

    def _lock_for(self, client_key: str) -> threading.Lock:
        return self._stripes[hash(client_key) % LOCK_STRIPES]

    def _window_start(self, now: float) -> float:
        return now - (now % self.window_seconds)

    def hit(self, client_key: str) -> RateLimitDecision:
        """Count one request for `client_key` and decide whether it may proceed."""
        now = self._clock()
        window_start = self._window_start(now)

        with self._lock_for(client_key):
            window = self._windows.get(client_key)
            if window is None or window.window_start != window_start:
                window = RateWindow(client_key=client_key, window_start=window_start)
                self._windows[client_key] = window
            window.count += 1
            count = window.count

        self._maybe_sweep(now)

        return RateLimitDecision(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_at=window_start + self.window_seconds,
        )

    def current_count(self, client_key: str) -> int:
        now = self._clock()
        with self._lock_for(client_key):
            window = self._windows.get(client_key)
            if window is None or window.window_start != self._window_start(now):
                return 0
            return window.count

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self.window_seconds:
            return
        if not self._sweep_lock.acquire(blocking=False):
            return
        try:
            self._last_sweep = now
            current_start = self._window_start(now)
            removed = 0
            for client_key in list(self._windows):
                with self._lock_for(client_key):
                    window = self._windows.get(client_key)
                    if window is not None and window.window_start < current_start:
                        del self._windows[client_key]
                        removed += 1
            if removed:
                logger.debug(f"Rate limiter swept {removed} expired window(s)")
        finally:
            self._sweep_lock.release()

    def reset(self) -> None:
        for lock in self._stripes:
            lock.acquire()
        try:
            self._windows.clear()
        finally:
            for lock in self._stripes:
                lock.release()


# Global limiter instance (singleton pattern)
_rate_limiter: Optional[FixedWindowRateLimiter] = None


def get_rate_limiter() -> FixedWindowRateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = FixedWindowRateLimiter(
            limit=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
    return _rate_limiter
