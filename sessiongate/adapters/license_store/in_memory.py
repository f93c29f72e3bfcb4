"""In-memory license redemption register (per-process, lost on restart)."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from sessiongate.adapters.license_store.base import (
    DEFAULT_LICENSE_RETENTION_SECONDS,
    AbstractLicenseStore,
    LicenseRecord,
)
from sessiongate.core.logging import fingerprint

logger = logging.getLogger(__name__)


class InMemoryLicenseStore(AbstractLicenseStore):
    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._records: dict[str, LicenseRecord] = {}

    def is_used(self, license_key: str) -> bool:
        with self._lock:
            return license_key in self._records

    def mark_used(self, license_key: str, email: str | None = None) -> None:
        with self._lock:
            self._records[license_key] = LicenseRecord(
                key=license_key, used_at=self._clock(), email=email
            )

    def redeem(self, license_key: str, email: str | None = None) -> bool:
        with self._lock:
            if license_key in self._records:
                redeemed = False
            else:
                self.mark_used(license_key, email)
                redeemed = True

        logger.info(
            "license.redeemed" if redeemed else "license.already_redeemed",
            extra={"license_hash": fingerprint(license_key)},
        )
        return redeemed

    def cleanup_older_than(
        self, max_age_seconds: float = DEFAULT_LICENSE_RETENTION_SECONDS
    ) -> int:
        """Forget redemptions older than ``max_age_seconds``.

        Returns:
            Number of records removed.
        """
        cutoff = self._clock() - max_age_seconds
        with self._lock:
            old = [key for key, record in self._records.items() if record.used_at < cutoff]
            for key in old:
                del self._records[key]
        return len(old)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"total_used": len(self._records)}
