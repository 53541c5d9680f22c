"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from warranty_app.application.use_cases.phone_verification import PhoneVerificationService
from warranty_app.application.use_cases.warranties import (
    WarrantyExpirationMonitor,
    WarrantyNotificationCache,
)
from warranty_app.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """Return the user identifier carried by the bearer token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User ID not found in token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_warranty_cache(request: Request) -> WarrantyNotificationCache:
    """Return the snapshot cache shared with the background monitor."""

    return request.app.state.warranty_cache


def get_warranty_monitor(request: Request) -> WarrantyExpirationMonitor | None:
    return getattr(request.app.state, "warranty_monitor", None)


def get_phone_verification_service(request: Request) -> PhoneVerificationService:
    return request.app.state.phone_verification
