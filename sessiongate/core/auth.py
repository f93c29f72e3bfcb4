"""API key guard for operator endpoints.

Session and license routes are public (the browser calls them during the
payment hand-off). Only the admin stats endpoint requires an X-API-Key, validated
against a comma-separated list from APP_API_KEYS.
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Header

from sessiongate.core.config import settings
from sessiongate.core.errors import AuthenticationAppError
from sessiongate.core.logging import fingerprint

logger = logging.getLogger(__name__)


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Examples:
        >>> sorted(parse_api_keys("key1, key2 ,key3 "))
        ['key1', 'key2', 'key3']
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()

    return {key.strip() for key in keys_string.split(",") if key.strip()}


def validate_api_key(provided_key: str | None) -> None:
    """Validate that provided API key matches one of the configured keys.

    Args:
        provided_key: API key to validate (None when the header is absent).

    Raises:
        AuthenticationAppError: If the key is missing or invalid, or if
            authentication is required but no keys are configured.
    """
    if not settings.app.api_key_required:
        return

    valid_keys = parse_api_keys(settings.app.api_keys)

    if not valid_keys:
        logger.error(
            "auth.keys_not_configured",
            extra={"auth_required": True},
        )
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
            details={"hint": "Set APP_API_KEYS or disable auth with APP_API_KEY_REQUIRED=false"},
        )

    if not provided_key:
        logger.warning(
            "auth.missing_key",
            extra={"auth_required": True, "api_key_present": False},
        )
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Missing API key. Provide X-API-Key header.",
        )

    if not any(hmac.compare_digest(provided_key, key) for key in valid_keys):
        logger.warning(
            "auth.invalid_key",
            extra={"api_key_hash": fingerprint(provided_key)},
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def verify_api_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency for API key authentication.

    Usage:
        @router.get("/admin/stats", dependencies=[Depends(verify_api_key)])

    Raises:
        AuthenticationAppError: Rendered as 403 by the global handler.
    """
    validate_api_key(x_api_key)
    if x_api_key:
        logger.debug("auth.success", extra={"api_key_hash": fingerprint(x_api_key)})
