"""Endpoints exposing the caller's expiring warranties."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from warranty_app.application.use_cases.warranties import (
    WarrantyExpirationMonitor,
    WarrantyNotificationCache,
    count_expiring_warranties,
    list_expiring_warranties,
)
from warranty_app.interfaces.api.dependencies import (
    get_current_user_id,
    get_warranty_cache,
    get_warranty_monitor,
)
from warranty_app.interfaces.api.schemas import (
    WarrantyCheckRead,
    WarrantyNotificationCount,
    WarrantyNotificationRead,
)

router = APIRouter(prefix="/warranty-notifications", tags=["warranty-notifications"])
logger = logging.getLogger(__name__)


@router.get("/expiring", response_model=list[WarrantyNotificationRead])
def get_expiring_warranties(
    user_id: str = Depends(get_current_user_id),
    cache: WarrantyNotificationCache = Depends(get_warranty_cache),
) -> list[WarrantyNotificationRead]:
    """Return the caller's warranties expiring soon, soonest first.

    Results come from the latest published check, so they follow each
    owner's notification threshold.
    """

    return [
        WarrantyNotificationRead.model_validate(item)
        for item in list_expiring_warranties(cache, user_id=user_id)
    ]


@router.get("/expiring/count", response_model=WarrantyNotificationCount)
def get_expiring_warranties_count(
    user_id: str = Depends(get_current_user_id),
    cache: WarrantyNotificationCache = Depends(get_warranty_cache),
) -> WarrantyNotificationCount:
    """Return how many of the caller's warranties expire soon."""

    return WarrantyNotificationCount(
        count=count_expiring_warranties(cache, user_id=user_id), user_id=user_id
    )


@router.post("/check", response_model=WarrantyCheckRead)
async def trigger_warranty_check(
    user_id: str = Depends(get_current_user_id),
    monitor: WarrantyExpirationMonitor | None = Depends(get_warranty_monitor),
) -> WarrantyCheckRead:
    """Run one expiration check now instead of waiting for the next interval."""

    if monitor is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Warranty monitor is disabled",
        )

    logger.info("Warranty expiration check triggered by user %s", user_id)
    if not await monitor.run_once():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Warranty expiration check failed",
        )
    return WarrantyCheckRead(success=True, message="Warranty expiration check completed")
