"""License redemption registers."""

from sessiongate.adapters.license_store.base import (
    DEFAULT_LICENSE_RETENTION_SECONDS,
    AbstractLicenseStore,
    LicenseRecord,
)
from sessiongate.adapters.license_store.in_memory import InMemoryLicenseStore

__all__ = [
    "DEFAULT_LICENSE_RETENTION_SECONDS",
    "AbstractLicenseStore",
    "InMemoryLicenseStore",
    "LicenseRecord",
]
