"""Pydantic models for the phone verification endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

PHONE_NUMBER_PATTERN = r"^\+?[1-9]\d{6,14}$"


class SendVerificationCodeRequest(BaseModel):
    """Phone number that should receive a verification code."""

    phone_number: str = Field(
        ...,
        pattern=PHONE_NUMBER_PATTERN,
        description="Phone number in international format, e.g. +15551234567",
    )


class VerifyCodeRequest(BaseModel):
    """Code typed by the user."""

    code: str = Field(..., min_length=1, max_length=12)


class VerificationResponse(BaseModel):
    success: bool
    message: str


__all__ = [
    "SendVerificationCodeRequest",
    "VerificationResponse",
    "VerifyCodeRequest",
]
