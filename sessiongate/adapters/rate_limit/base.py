"""Rate limiter interfaces.

Routes depend on this abstraction (not the concrete implementation) so the
in-process store can later be swapped for a shared one (e.g., Redis) without
touching the HTTP layer.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_WINDOW_MS = 15 * 60 * 1000


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single attempt against a key's budget.

    Attributes:
        allowed: Whether the attempt may proceed.
        remaining_attempts: Attempts left in the current window (0 when blocked).
        reset_in_ms: Milliseconds until the current window ends.
        limit: Max attempts per window the check was made with.
    """

    allowed: bool
    remaining_attempts: int
    reset_in_ms: int
    limit: int

    @property
    def retry_after_seconds(self) -> int:
        """Whole seconds until the window ends, rounded up."""
        return max(0, math.ceil(self.reset_in_ms / 1000))

    def to_dict(self) -> dict[str, bool | int]:
        return {
            "allowed": self.allowed,
            "remainingAttempts": self.remaining_attempts,
            "resetIn": self.reset_in_ms,
        }


class AbstractRateLimiter(ABC):
    """Interface for attempt limiters keyed by an arbitrary string."""

    @abstractmethod
    def check(
        self,
        key: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        window_ms: int = DEFAULT_WINDOW_MS,
    ) -> RateLimitResult:
        """Record an attempt for ``key`` and report whether it is allowed.

        Args:
            key: Limited subject (e.g., ``"session-verify:203.0.113.7"``).
            max_attempts: Attempts allowed per window.
            window_ms: Window length in milliseconds.

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError

    @abstractmethod
    def reset(self, key: str) -> None:
        """Forget any attempts recorded for ``key``."""
        raise NotImplementedError

    @abstractmethod
    def sweep(self) -> int:
        """Drop windows that have already elapsed and return how many went."""
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> dict[str, int]:
        """Return ``{"keys": <tracked keys>}``."""
        raise NotImplementedError
