from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from sessiongate.adapters.license_store.base import AbstractLicenseStore
from sessiongate.api.request_body import read_json_object
from sessiongate.core.dependencies import get_license_store
from sessiongate.core.errors import ConflictAppError, ValidationAppError
from sessiongate.core.rate_limit import rate_limited
from sessiongate.schemas.session import LicenseRedeemRequest, LicenseRedeemResponse

router = APIRouter(prefix="/license", tags=["License"])


@router.post(
    "/redeem",
    response_model=LicenseRedeemResponse,
    dependencies=[
        Depends(
            rate_limited(
                "license-redeem",
                max_attempts_setting="license_redeem_max_attempts",
                window_setting="license_redeem_window_seconds",
            )
        )
    ],
)
async def redeem_license(
    request: Request,
    store: Annotated[AbstractLicenseStore, Depends(get_license_store)],
) -> LicenseRedeemResponse:
    """Redeem a purchased license key. Each key can be redeemed once.

    Raises:
        ValidationAppError: 400 when license_key is missing or empty.
        ConflictAppError: 409 when the key was already redeemed.
    """
    try:
        payload = LicenseRedeemRequest.model_validate(await read_json_object(request))
    except ValidationError as exc:
        raise ValidationAppError(
            code="license_key_required",
            message="License key is required",
        ) from exc

    if not store.redeem(payload.license_key, payload.email):
        raise ConflictAppError(
            code="license_already_redeemed",
            message="This license key has already been used.",
        )

    return LicenseRedeemResponse()
