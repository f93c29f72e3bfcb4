"""Pydantic schemas for session, license and admin responses."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class SessionCreatedResponse(BaseModel):
    """Body returned when a token has been recorded."""

    success: bool = Field(True, description="Always true on a 200 response.")
    token: str = Field(..., description="The recorded session token (echoed back).")
    message: str = Field("Session created successfully")


class SessionVerifiedResponse(BaseModel):
    """Body returned when a token is valid (and, for verify, now consumed)."""

    valid: bool = Field(True, description="Always true on a 200 response.")
    message: str = Field(..., description="Human-readable confirmation.")


class SessionRejectedResponse(BaseModel):
    """Body returned for malformed, unknown, used, expired or throttled tokens."""

    model_config = ConfigDict(populate_by_name=True)

    valid: bool = Field(False, description="Always false.")
    error: str = Field(
        ...,
        description="Rejection reason, e.g. 'Session not found', 'Session already used'.",
    )
    reset_in: int | None = Field(
        None,
        serialization_alias="resetIn",
        description="Minutes until verification attempts are allowed again (429 only).",
    )


class ErrorMessageResponse(BaseModel):
    """Plain error body used by the session create endpoint."""

    error: str


class LicenseRedeemRequest(BaseModel):
    """License redemption request body."""

    license_key: str = Field(..., min_length=1, description="License key to redeem once.")
    email: str | None = Field(None, description="Purchaser email, kept for support lookups.")


class LicenseRedeemResponse(BaseModel):
    success: bool = True
    message: str = "License redeemed successfully"


class AdminStatsResponse(BaseModel):
    """Operational counters; never includes token or license values."""

    sessions: Dict[str, Any] = Field(default_factory=dict)
    licenses: Dict[str, Any] = Field(default_factory=dict)
    rate_limit_keys: int = Field(0, description="Keys currently tracked by the limiter.")
