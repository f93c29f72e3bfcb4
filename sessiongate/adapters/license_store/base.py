"""Register of license keys that have already been redeemed."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

DEFAULT_LICENSE_RETENTION_SECONDS = 30 * 24 * 60 * 60


@dataclass
class LicenseRecord:
    key: str
    used_at: float
    email: str | None = None


class AbstractLicenseStore(ABC):
    """Interface for license redemption registers."""

    @abstractmethod
    def is_used(self, license_key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mark_used(self, license_key: str, email: str | None = None) -> None:
        raise NotImplementedError

    @abstractmethod
    def redeem(self, license_key: str, email: str | None = None) -> bool:
        """Mark ``license_key`` used unless it already is.

        Returns:
            True if this call redeemed the key, False if it had been redeemed before.
        """
        raise NotImplementedError

    @abstractmethod
    def cleanup_older_than(
        self, max_age_seconds: float = DEFAULT_LICENSE_RETENTION_SECONDS
    ) -> int:
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> dict[str, int]:
        raise NotImplementedError
