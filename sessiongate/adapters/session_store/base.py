"""Payment session token store interfaces.

A session token is generated by the browser right before it is sent to the
payment provider. The server records it on the way out and consumes it when
the provider redirects back, so a success URL cannot be replayed or shared.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

DEFAULT_SESSION_EXPIRY_SECONDS = 60 * 60

REASON_NOT_FOUND = "Session not found"
REASON_ALREADY_USED = "Session already used"
REASON_EXPIRED = "Session expired"

# Canonical UUIDv4: version nibble 4, variant nibble 8/9/a/b.
SESSION_TOKEN_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_session_token(value: Any) -> bool:
    """Return True when ``value`` is a string in canonical UUIDv4 form."""
    return isinstance(value, str) and SESSION_TOKEN_PATTERN.fullmatch(value) is not None


@dataclass
class SessionToken:
    """A recorded token and whether it has been consumed."""

    token: str
    created_at: float
    used: bool = False


@dataclass(frozen=True)
class SessionVerification:
    """Outcome of looking up a token.

    Attributes:
        valid: True only when the token exists, is unused and not expired.
        reason: Human-readable rejection reason when ``valid`` is False.
    """

    valid: bool
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"valid": self.valid}
        if self.reason is not None:
            data["reason"] = self.reason
        return data


class AbstractSessionStore(ABC):
    """Interface for single-use, expiring session token stores."""

    @abstractmethod
    def create_session(self, token: str) -> None:
        """Record ``token`` as a fresh, unused session (overwrites any prior record)."""
        raise NotImplementedError

    @abstractmethod
    def verify_and_use_session(self, token: str) -> SessionVerification:
        """Consume ``token`` if it is valid.

        Never raises for unknown, used or expired tokens; those are reported
        through :class:`SessionVerification`.
        """
        raise NotImplementedError

    @abstractmethod
    def check_session(self, token: str) -> SessionVerification:
        """Report whether ``token`` would verify, without consuming it."""
        raise NotImplementedError

    @abstractmethod
    def cleanup_expired(self) -> int:
        """Remove every record past expiry and return how many went."""
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> dict[str, int | float]:
        """Return ``total``, ``active``, ``used`` and ``expiry_seconds`` counters."""
        raise NotImplementedError
