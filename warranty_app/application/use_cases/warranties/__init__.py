"""Use cases for monitoring warranty expirations."""

from .detect_expiring import (
    ExpiringReceipt,
    detect_expiring_warranties,
    effective_threshold,
    query_window,
    select_unnotified,
)
from .dispatch import EMAIL, SMS, LoggingNotifier, NotificationRouter, select_channels
from .monitor import (
    CheckSummary,
    WarrantyExpirationMonitor,
    build_notifier,
    build_warranty_cache,
    build_warranty_monitor,
)
from .queries import count_expiring_warranties, list_expiring_warranties
from .warranty_cache import WarrantyNotificationCache

__all__ = [
    "EMAIL",
    "SMS",
    "CheckSummary",
    "ExpiringReceipt",
    "LoggingNotifier",
    "NotificationRouter",
    "WarrantyExpirationMonitor",
    "WarrantyNotificationCache",
    "build_notifier",
    "build_warranty_cache",
    "build_warranty_monitor",
    "count_expiring_warranties",
    "detect_expiring_warranties",
    "effective_threshold",
    "list_expiring_warranties",
    "query_window",
    "select_channels",
    "select_unnotified",
]
