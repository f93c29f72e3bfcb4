"""Single-use payment session token stores."""

from sessiongate.adapters.session_store.base import (
    DEFAULT_SESSION_EXPIRY_SECONDS,
    REASON_ALREADY_USED,
    REASON_EXPIRED,
    REASON_NOT_FOUND,
    SESSION_TOKEN_PATTERN,
    AbstractSessionStore,
    SessionToken,
    SessionVerification,
    is_valid_session_token,
)
from sessiongate.adapters.session_store.in_memory import InMemorySessionTokenStore

__all__ = [
    "DEFAULT_SESSION_EXPIRY_SECONDS",
    "REASON_ALREADY_USED",
    "REASON_EXPIRED",
    "REASON_NOT_FOUND",
    "SESSION_TOKEN_PATTERN",
    "AbstractSessionStore",
    "InMemorySessionTokenStore",
    "SessionToken",
    "SessionVerification",
    "is_valid_session_token",
]
