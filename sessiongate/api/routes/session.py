"""Payment session hand-off endpoints.

The browser creates a token before redirecting to the payment provider, and
verifies it when the provider sends the user back. A token verifies once.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from sessiongate.adapters.rate_limit.base import AbstractRateLimiter
from sessiongate.adapters.session_store.base import (
    AbstractSessionStore,
    SessionVerification,
    is_valid_session_token,
)
from sessiongate.api.request_body import read_json_object
from sessiongate.core.config import settings
from sessiongate.core.dependencies import get_rate_limiter, get_session_store
from sessiongate.core.rate_limit import (
    build_rate_limit_key,
    check_attempt,
    rate_limit_headers,
    rate_limited,
)
from sessiongate.schemas.session import (
    ErrorMessageResponse,
    SessionCreatedResponse,
    SessionRejectedResponse,
    SessionVerifiedResponse,
)


router = APIRouter(prefix="/session", tags=["Session"])

SessionStore = Annotated[AbstractSessionStore, Depends(get_session_store)]
Limiter = Annotated[AbstractRateLimiter, Depends(get_rate_limiter)]

VERIFY_SCOPE = "session-verify"


def _rejected(
    error: str,
    status_code: int,
    *,
    reset_in: int | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = SessionRejectedResponse(error=error, reset_in=reset_in)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


@router.post(
    "/create",
    response_model=SessionCreatedResponse,
    responses={400: {"model": ErrorMessageResponse}, 429: {"description": "Too many requests"}},
    dependencies=[
        Depends(
            rate_limited(
                "session-create",
                max_attempts_setting="session_create_max_attempts",
                window_setting="session_create_window_seconds",
            )
        )
    ],
)
async def create_session(request: Request, store: SessionStore) -> Any:
    """Record a client-generated UUIDv4 token as an unused payment session.

    Re-posting the same token resets it to a fresh, unused session.
    """
    body = await read_json_object(request)
    token = body.get("token")

    if not token or not isinstance(token, str):
        return JSONResponse(status_code=400, content={"error": "Invalid token"})

    if not is_valid_session_token(token):
        return JSONResponse(status_code=400, content={"error": "Invalid token format"})

    store.create_session(token)
    return SessionCreatedResponse(token=token)


async def _verify(
    request: Request,
    limiter: AbstractRateLimiter,
    lookup: Callable[[str], SessionVerification],
    success_message: str,
    *,
    reset_on_success: bool,
) -> Any:
    body = await read_json_object(request)
    token = body.get("token")

    if not token or not isinstance(token, str):
        return _rejected("Invalid token", 400)

    key = build_rate_limit_key(VERIFY_SCOPE, request)
    if settings.app.rate_limit_enabled:
        attempt = check_attempt(
            limiter,
            key,
            max_attempts=settings.app.session_verify_max_attempts,
            window_seconds=settings.app.session_verify_window_seconds,
        )
        if not attempt.allowed:
            return _rejected(
                "Too many failed attempts. Please try again later.",
                429,
                reset_in=math.ceil(attempt.reset_in_ms / 1000 / 60),
                headers=rate_limit_headers(attempt) or None,
            )

    result: SessionVerification = lookup(token)
    if not result.valid:
        return _rejected(result.reason or "Session verification failed", 401)

    if reset_on_success:
        # Earlier failures from this client no longer count.
        limiter.reset(key)
    return SessionVerifiedResponse(message=success_message)


@router.post(
    "/verify",
    response_model=SessionVerifiedResponse,
    responses={
        400: {"model": SessionRejectedResponse},
        401: {"model": SessionRejectedResponse},
        429: {"model": SessionRejectedResponse},
    },
)
async def verify_session(request: Request, store: SessionStore, limiter: Limiter) -> Any:
    """Consume a session token. Succeeds at most once per token."""
    return await _verify(
        request,
        limiter,
        store.verify_and_use_session,
        "Session verified successfully",
        reset_on_success=True,
    )


@router.post(
    "/check",
    response_model=SessionVerifiedResponse,
    responses={
        400: {"model": SessionRejectedResponse},
        401: {"model": SessionRejectedResponse},
        429: {"model": SessionRejectedResponse},
    },
)
async def check_session(request: Request, store: SessionStore, limiter: Limiter) -> Any:
    """Report whether a token would verify, without consuming it.

    A successful check does not restore the caller's verify budget.
    """
    return await _verify(
        request, limiter, store.check_session, "Session is valid", reset_on_success=False
    )
