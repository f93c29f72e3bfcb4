"""Attempt throttling for FastAPI routes.

This module wires the limiter adapter into the HTTP layer.

Strategy:
- Fixed-window budget per client IP and route scope (e.g. ``session-create:<ip>``).
- Budgets come from settings and are read per request, so tests can patch them.
- Disabled entirely with APP_RATE_LIMIT_ENABLED=false.
"""

from __future__ import annotations

import logging
from typing import Annotated, Awaitable, Callable

from fastapi import Depends, Request

from sessiongate.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from sessiongate.core.config import settings
from sessiongate.core.dependencies import get_rate_limiter
from sessiongate.core.errors import RateLimitAppError
from sessiongate.core.logging import fingerprint

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    """Best-effort client address, honouring reverse-proxy headers.

    Returns:
        First X-Forwarded-For hop, else X-Real-IP, else the socket peer,
        else ``"unknown"``.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


def build_rate_limit_key(scope: str, request: Request) -> str:
    return f"{scope}:{client_ip(request)}"


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Headers describing the caller's budget, empty when disabled in settings."""

    if not settings.app.rate_limit_include_headers:
        return {}
    return {
        "Retry-After": str(result.retry_after_seconds),
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining_attempts),
        "X-RateLimit-Reset": str(result.retry_after_seconds),
    }


def check_attempt(
    limiter: AbstractRateLimiter,
    key: str,
    *,
    max_attempts: int,
    window_seconds: int,
) -> RateLimitResult:
    """Record one attempt for ``key`` and log the decision."""

    result = limiter.check(key, max_attempts=max_attempts, window_ms=window_seconds * 1000)
    key_hash = fingerprint(key)

    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining_attempts,
                "window_s": window_seconds,
            },
        )
    else:
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "window_s": window_seconds,
                "retry_after_s": result.retry_after_seconds,
            },
        )
    return result


def rate_limited(
    scope: str,
    *,
    max_attempts_setting: str,
    window_setting: str,
) -> Callable[..., Awaitable[None]]:
    """Build a dependency that spends one attempt from the client's budget.

    Args:
        scope: Key prefix naming the protected operation.
        max_attempts_setting: Name of the AppSettings field holding the budget.
        window_setting: Name of the AppSettings field holding the window (seconds).

    Returns:
        Async FastAPI dependency raising RateLimitAppError (429) when exhausted.
    """

    async def enforce_rate_limit(
        request: Request,
        limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
    ) -> None:
        if not settings.app.rate_limit_enabled:
            return

        result = check_attempt(
            limiter,
            build_rate_limit_key(scope, request),
            max_attempts=getattr(settings.app, max_attempts_setting),
            window_seconds=getattr(settings.app, window_setting),
        )
        if result.allowed:
            return

        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message="Too many requests. Please try again later.",
            details={"retry_after": result.retry_after_seconds},
            headers=rate_limit_headers(result),
        )

    return enforce_rate_limit
