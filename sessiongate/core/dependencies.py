"""Accessors for the per-application store instances.

The stores are built once in ``create_app()`` and hung on ``app.state``; routes
receive them through ``Depends`` so tests can build isolated apps with their
own clocks.
"""

from __future__ import annotations

from fastapi import Request

from sessiongate.adapters.license_store.base import AbstractLicenseStore
from sessiongate.adapters.rate_limit.base import AbstractRateLimiter
from sessiongate.adapters.session_store.base import AbstractSessionStore


def get_session_store(request: Request) -> AbstractSessionStore:
    return request.app.state.session_store


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    return request.app.state.rate_limiter


def get_license_store(request: Request) -> AbstractLicenseStore:
    return request.app.state.license_store
