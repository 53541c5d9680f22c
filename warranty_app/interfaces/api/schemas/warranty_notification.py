"""Pydantic models describing expiring warranty payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class WarrantyNotificationRead(BaseModel):
    """A warranty of the caller that expires soon."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    user_email: str
    product_name: str
    expiration_date: datetime
    receipt_id: str
    days_until_expiration: int


class WarrantyNotificationCount(BaseModel):
    """Number of the caller's warranties that expire soon."""

    count: int
    user_id: str


class WarrantyCheckRead(BaseModel):
    """Outcome of a manually triggered expiration check."""

    success: bool
    message: str


__all__ = ["WarrantyCheckRead", "WarrantyNotificationCount", "WarrantyNotificationRead"]
