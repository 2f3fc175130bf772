"""
Sliding-window rate limiter keyed by client address.

Each key keeps the timestamps of its admitted requests inside the trailing
window. Expired timestamps are purged lazily on every check; idle keys are
swept periodically and the key table is capped as an LRU so memory stays
bounded no matter how many distinct clients show up.
"""

import asyncio
import logging
import time
from collections import OrderedDict, deque
from typing import Callable

from research_finder.constants import (
    RATE_LIMIT,
    RATE_LIMIT_MAX_KEYS,
    RATE_WINDOW_SECONDS,
)

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """
    Admit at most `limit` requests per key within `window_seconds`.

    Rejected requests are not recorded, so a client that keeps hammering
    is admitted again as soon as its oldest admission leaves the window.
    """

    def __init__(
        self,
        limit: int = RATE_LIMIT,
        window_seconds: float = RATE_WINDOW_SECONDS,
        *,
        max_keys: int = RATE_LIMIT_MAX_KEYS,
        sweep_interval_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self.sweep_interval_seconds = (
            window_seconds if sweep_interval_seconds is None else sweep_interval_seconds
        )
        self._clock = clock
        self._windows: OrderedDict[str, deque[float]] = OrderedDict()
        self._last_sweep = clock()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    async def admit(self, key: str) -> bool:
        """Record and admit a request for `key`, or return False when over the limit."""
        async with self._lock:
            now = self._clock()
            self._maybe_sweep(now)

            window = self._windows.get(key)
            if window is None:
                window = deque()
                self._windows[key] = window
            self._windows.move_to_end(key)

            cutoff = now - self.window_seconds
            while window and window[0] <= cutoff:
                window.popleft()

            if len(window) >= self.limit:
                logger.info("Rate limit hit for key=%s (%d in window)", key, len(window))
                return False

            window.append(now)
            self._evict_overflow()
            return True

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self.sweep_interval_seconds:
            return
        self._last_sweep = now
        cutoff = now - self.window_seconds
        idle = [k for k, w in self._windows.items() if not w or w[-1] <= cutoff]
        for key in idle:
            del self._windows[key]
        if idle:
            logger.debug("Rate limiter swept %d idle keys", len(idle))

    def _evict_overflow(self) -> None:
        while len(self._windows) > self.max_keys:
            evicted, _ = self._windows.popitem(last=False)
            logger.debug("Rate limiter evicted key=%s (max_keys=%d)", evicted, self.max_keys)
