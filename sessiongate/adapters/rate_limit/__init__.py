"""Attempt limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory limiter and later migrate to Redis or another shared store
without changing the API layer.
"""

from sessiongate.adapters.rate_limit.base import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_WINDOW_MS,
    AbstractRateLimiter,
    RateLimitResult,
)
from sessiongate.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_WINDOW_MS",
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
]
