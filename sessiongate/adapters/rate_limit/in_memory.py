"""In-memory fixed-window attempt limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Each key's window starts at its first attempt and is replaced wholesale once
  it has elapsed, so a burst straddling the boundary can briefly exceed the
  nominal rate.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from sessiongate.adapters.rate_limit.base import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_WINDOW_MS,
    AbstractRateLimiter,
    RateLimitResult,
)

logger = logging.getLogger(__name__)


@dataclass
class _AttemptWindow:
    count: int
    reset_at_ms: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Attempt limiter holding one counter per key in a dict.

    Stale windows are dropped lazily on the next access to the same key, or
    in bulk through :meth:`sweep`.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the limiter.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: dict[str, _AttemptWindow] = {}

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def check(
        self,
        key: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        window_ms: int = DEFAULT_WINDOW_MS,
    ) -> RateLimitResult:
        """Record an attempt for ``key`` within a fixed window.

        A denied attempt does not count against the budget: the window is left
        untouched until it expires.

        Args:
            key: Limited subject; any string is accepted.
            max_attempts: Attempts allowed per window.
            window_ms: Window length in milliseconds.

        Returns:
            RateLimitResult with the decision and the time left in the window.
        """
        now = self._now_ms()

        with self._lock:
            window = self._windows.get(key)
            if window is not None and now > window.reset_at_ms:
                del self._windows[key]
                window = None

            if window is None:
                self._windows[key] = _AttemptWindow(count=1, reset_at_ms=now + window_ms)
                return RateLimitResult(
                    allowed=True,
                    remaining_attempts=max_attempts - 1,
                    reset_in_ms=window_ms,
                    limit=max_attempts,
                )

            if window.count >= max_attempts:
                return RateLimitResult(
                    allowed=False,
                    remaining_attempts=0,
                    reset_in_ms=window.reset_at_ms - now,
                    limit=max_attempts,
                )

            window.count += 1
            return RateLimitResult(
                allowed=True,
                remaining_attempts=max_attempts - window.count,
                reset_in_ms=window.reset_at_ms - now,
                limit=max_attempts,
            )

    def reset(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)

    def sweep(self) -> int:
        """Drop every window that has already elapsed.

        Returns:
            Number of keys removed.
        """
        now = self._now_ms()
        with self._lock:
            stale = [key for key, window in self._windows.items() if now > window.reset_at_ms]
            for key in stale:
                del self._windows[key]

        if stale:
            logger.debug("rate_limit.swept", extra={"removed": len(stale)})
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def stats(self) -> dict[str, int]:
        return {"keys": len(self)}
