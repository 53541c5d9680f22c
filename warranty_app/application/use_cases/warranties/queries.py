"""Read-only queries over the published expiring-warranty snapshot."""

from __future__ import annotations

import logging

from warranty_app.domain.entities import WarrantyNotification

from .warranty_cache import WarrantyNotificationCache

logger = logging.getLogger(__name__)


def list_expiring_warranties(
    cache: WarrantyNotificationCache, *, user_id: str
) -> list[WarrantyNotification]:
    """Return the warranties of ``user_id`` expiring soon, soonest first."""

    warranties = cache.for_user(user_id)
    logger.info("User %s retrieved %s expiring warranties", user_id, len(warranties))
    return warranties


def count_expiring_warranties(cache: WarrantyNotificationCache, *, user_id: str) -> int:
    """Return how many of ``user_id``'s warranties are expiring soon."""

    return cache.count_for_user(user_id)


__all__ = ["count_expiring_warranties", "list_expiring_warranties"]
