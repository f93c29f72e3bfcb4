"""In-memory session token store.

Notes:
- Per-process only: state is lost on restart and not shared between workers.
- Thread-safe: lookup and mark-as-used happen under one lock, so two
  concurrent verifications of the same token cannot both succeed.
- Expired records are swept on every create, and dropped individually when
  a verification finds them expired.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from sessiongate.adapters.session_store.base import (
    DEFAULT_SESSION_EXPIRY_SECONDS,
    REASON_ALREADY_USED,
    REASON_EXPIRED,
    REASON_NOT_FOUND,
    AbstractSessionStore,
    SessionToken,
    SessionVerification,
)
from sessiongate.core.logging import fingerprint

logger = logging.getLogger(__name__)


class InMemorySessionTokenStore(AbstractSessionStore):
    """Dict-backed store of single-use payment session tokens.

    Attributes:
        expiry_seconds: Lifetime of a token, measured from its creation.
    """

    def __init__(
        self,
        *,
        expiry_seconds: float = DEFAULT_SESSION_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the store.

        Args:
            expiry_seconds: Lifetime of a token after creation.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If expiry_seconds is not positive.
        """
        if expiry_seconds <= 0:
            raise ValueError("expiry_seconds must be > 0")

        self.expiry_seconds = expiry_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._sessions: dict[str, SessionToken] = {}

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemorySessionTokenStore(expiry_seconds={self.expiry_seconds}, "
            f"size={len(self._sessions)})"
        )

    def _is_expired(self, session: SessionToken, now: float) -> bool:
        return now - session.created_at > self.expiry_seconds

    def create_session(self, token: str) -> None:
        now = self._clock()
        with self._lock:
            self._sessions[token] = SessionToken(token=token, created_at=now)
            removed = self._evict_expired_locked(now)

        logger.info(
            "session.created",
            extra={"token_hash": fingerprint(token), "swept": removed},
        )

    def verify_and_use_session(self, token: str) -> SessionVerification:
        """Consume a token if it exists, is unused and has not expired.

        Args:
            token: Token previously passed to :meth:`create_session`.

        Returns:
            ``SessionVerification(valid=True)`` on success, otherwise a
            rejection carrying one of the ``REASON_*`` strings.
        """
        now = self._clock()
        with self._lock:
            result = self._lookup_locked(token, now)
            if result.valid:
                self._sessions[token].used = True

        self._log_outcome("session.verify", token, result)
        return result

    def check_session(self, token: str) -> SessionVerification:
        now = self._clock()
        with self._lock:
            result = self._lookup_locked(token, now)

        self._log_outcome("session.check", token, result)
        return result

    def cleanup_expired(self) -> int:
        """Remove every record past expiry.

        Returns:
            Number of records removed.
        """
        now = self._clock()
        with self._lock:
            return self._evict_expired_locked(now)

    def stats(self) -> dict[str, int | float]:
        """Return counts of live records without exposing token values."""

        with self._lock:
            self._evict_expired_locked(self._clock())
            used = sum(1 for session in self._sessions.values() if session.used)
            return {
                "total": len(self._sessions),
                "active": len(self._sessions) - used,
                "used": used,
                "expiry_seconds": self.expiry_seconds,
            }

    def _lookup_locked(self, token: str, now: float) -> SessionVerification:
        session = self._sessions.get(token)
        if session is None:
            return SessionVerification(valid=False, reason=REASON_NOT_FOUND)
        if session.used:
            return SessionVerification(valid=False, reason=REASON_ALREADY_USED)
        if self._is_expired(session, now):
            del self._sessions[token]
            return SessionVerification(valid=False, reason=REASON_EXPIRED)
        return SessionVerification(valid=True)

    def _evict_expired_locked(self, now: float) -> int:
        expired = [
            token for token, session in self._sessions.items() if self._is_expired(session, now)
        ]
        for token in expired:
            del self._sessions[token]
        return len(expired)

    def _log_outcome(self, event: str, token: str, result: SessionVerification) -> None:
        if result.valid:
            logger.info(f"{event}_accepted", extra={"token_hash": fingerprint(token)})
        else:
            logger.info(
                f"{event}_rejected",
                extra={"token_hash": fingerprint(token), "reason": result.reason},
            )
