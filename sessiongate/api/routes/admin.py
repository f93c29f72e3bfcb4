from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from sessiongate.adapters.license_store.base import AbstractLicenseStore
from sessiongate.adapters.rate_limit.base import AbstractRateLimiter
from sessiongate.adapters.session_store.base import AbstractSessionStore
from sessiongate.core.auth import verify_api_key
from sessiongate.core.dependencies import get_license_store, get_rate_limiter, get_session_store
from sessiongate.schemas.session import AdminStatsResponse

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_api_key)])


@router.get("/stats", response_model=AdminStatsResponse)
def admin_stats(
    session_store: Annotated[AbstractSessionStore, Depends(get_session_store)],
    limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
    license_store: Annotated[AbstractLicenseStore, Depends(get_license_store)],
) -> AdminStatsResponse:
    """Counters for the stores, taken after a maintenance sweep of each one."""

    session_store.cleanup_expired()
    limiter.sweep()
    license_store.cleanup_older_than()
    return AdminStatsResponse(
        sessions=session_store.stats(),
        licenses=license_store.stats(),
        rate_limit_keys=limiter.stats()["keys"],
    )
