"""Domain entity for a warranty that is about to expire."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class WarrantyNotification:
    """Snapshot row describing one receipt inside its notification window."""

    user_id: str
    user_email: str
    product_name: str
    expiration_date: datetime
    receipt_id: str
    days_until_expiration: int


__all__ = ["WarrantyNotification"]
