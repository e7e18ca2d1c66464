"""
Rate Limiter: keeps a fixed minimum gap between consecutive external requests.

Open Food Facts allows about 10 search requests per minute. A 7 s gap keeps
us near 8/min, so no burst can ever exceed the ceiling. This is a plain
last-request-timestamp check, not a scheduler: callers queue on an
asyncio.Lock and each waits until the gap since the previous request has
elapsed.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from loguru import logger


class MinIntervalRateLimiter:
    """
    Usage
    -----
    limiter = MinIntervalRateLimiter(min_interval=7.0)
    await limiter.acquire()      # returns immediately the first time
    await limiter.acquire()      # sleeps until 7 s after the previous call
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None

    @classmethod
    def per_minute(cls, max_requests: int, **kwargs) -> "MinIntervalRateLimiter":
        """Build a limiter from a requests-per-minute ceiling."""
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        return cls(60.0 / max_requests, **kwargs)

    async def acquire(self) -> None:
        """Wait until a request may be sent, then record it as sent."""
        # created lazily so the lock binds to the running event loop
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._last_request is not None:
                wait = self._last_request + self.min_interval - self._clock()
                if wait > 0:
                    logger.debug(f"[RateLimiter] waiting {wait:.2f}s")
                    await self._sleep(wait)
            self._last_request = self._clock()

    def status(self) -> dict:
        return {
            "min_interval_seconds": self.min_interval,
            "last_request": self._last_request,
        }
