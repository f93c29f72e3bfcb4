"""Application-level exception types.

This module defines domain errors raised at the HTTP boundary, enabling
consistent error handling, logging, and API responses. The stores themselves
never raise for rejected tokens or throttled keys; they return result values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    http_status: int
    retry_after: int
    remaining_attempts: int
    reset_in_ms: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


@dataclass
class RateLimitAppError(AppError):
    """Raised when a caller has exhausted its attempt budget.

    Attributes:
        headers: Response headers to send with the 429 (Retry-After, X-RateLimit-*).
    """

    headers: dict[str, str] | None = None


class ConflictAppError(AppError):
    """Raised when a single-use resource has already been consumed."""
