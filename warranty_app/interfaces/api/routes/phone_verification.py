"""Endpoints to verify the phone number used for SMS notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from warranty_app.application.use_cases.phone_verification import PhoneVerificationService
from warranty_app.interfaces.api.dependencies import (
    get_current_user_id,
    get_phone_verification_service,
)
from warranty_app.interfaces.api.schemas import (
    SendVerificationCodeRequest,
    VerificationResponse,
    VerifyCodeRequest,
)

router = APIRouter(prefix="/phone-verification", tags=["phone-verification"])
logger = logging.getLogger(__name__)

_INVALID_CODE_DETAIL = "Invalid or expired verification code"


@router.post("/send", response_model=VerificationResponse)
async def send_verification_code(
    payload: SendVerificationCodeRequest,
    user_id: str = Depends(get_current_user_id),
    service: PhoneVerificationService = Depends(get_phone_verification_service),
) -> VerificationResponse:
    """Text a new verification code to ``payload.phone_number``."""

    result = await service.send_verification_code(user_id, payload.phone_number)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return VerificationResponse(success=True, message=result.message)


@router.post("/verify", response_model=VerificationResponse)
def verify_code(
    payload: VerifyCodeRequest,
    user_id: str = Depends(get_current_user_id),
    service: PhoneVerificationService = Depends(get_phone_verification_service),
) -> VerificationResponse:
    """Check the code the caller received by SMS."""

    result = service.verify_code(user_id, payload.code)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_INVALID_CODE_DETAIL)
    return VerificationResponse(success=True, message=result.message)
