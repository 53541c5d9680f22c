"""Aggregate application use cases."""

from .phone_verification import PhoneVerificationService
from .warranties import WarrantyExpirationMonitor, build_warranty_monitor

__all__ = [
    "PhoneVerificationService",
    "WarrantyExpirationMonitor",
    "build_warranty_monitor",
]
