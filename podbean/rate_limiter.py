"""
Rate Limiter
------------
Sliding-window rate limiter for outbound API calls.
"""

import asyncio
import logging
import math
import time
from collections import deque
from typing import Callable, Deque, Optional

from .errors import RateLimitError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window rate limiter.

    Admits at most `max_calls` calls within any `window` seconds.
    Safe for concurrent use from multiple asyncio tasks.
    """

    def __init__(
        self,
        max_calls: int = 60,
        window: float = 60.0,
        *,
        blocking: bool = True,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if max_calls < 1:
            raise ValueError("max_calls must be at least 1")
        if window <= 0:
            raise ValueError("window must be positive")

        self.max_calls = max_calls
        self.window = float(window)
        self.blocking = blocking
        self._clock = clock or time.monotonic
        self._calls: Deque[float] = deque()
        self._lock = asyncio.Lock()

    async def admit(self) -> None:
        """
        Take a slot for one call.
        Waits until a slot frees up, or raises RateLimitError when non-blocking.

        The lock is held while waiting so that waiters are admitted in order.
        """
        async with self._lock:
            while True:
                now = self._clock()
                self._prune(now)

                if len(self._calls) < self.max_calls:
                    self._calls.append(now)
                    return

                wait_time = self._calls[0] + self.window - now
                if not self.blocking:
                    raise RateLimitError(retry_after=max(1, math.ceil(wait_time)))

                logger.debug(f"Rate limit reached ({self.max_calls}/{self.window}s), waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)

    def _prune(self, now: float) -> None:
        """Drop admissions that fell out of the window."""
        while self._calls and now - self._calls[0] >= self.window:
            self._calls.popleft()

    @property
    def available(self) -> int:
        """Number of calls that could be admitted right now."""
        self._prune(self._clock())
        return self.max_calls - len(self._calls)

    def reset(self) -> None:
        """Forget all recorded calls."""
        self._calls.clear()
