"""Find receipts whose warranty falls inside their owner's notification window."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from warranty_app.config import MAX_NOTIFICATION_THRESHOLD_DAYS
from warranty_app.domain.entities import Receipt, UserProfile, WarrantyNotification
from warranty_app.utils import ensure_utc

logger = logging.getLogger(__name__)

UNKNOWN_EMAIL = "unknown@example.com"


@dataclass(frozen=True)
class ExpiringReceipt:
    """A receipt that qualified for notification during a detection cycle."""

    notification: WarrantyNotification
    owner: UserProfile | None


def query_window(today: date) -> tuple[date, date]:
    """Return the exclusive start and inclusive end of the candidate query."""

    return today, today + timedelta(days=MAX_NOTIFICATION_THRESHOLD_DAYS)


def effective_threshold(owner: UserProfile | None, default_threshold_days: int) -> int:
    """Return the owner's override when set, the configured default otherwise."""

    if owner is not None and owner.notification_threshold_days is not None:
        return owner.notification_threshold_days
    return default_threshold_days


def detect_expiring_warranties(
    receipts: Iterable[Receipt],
    *,
    today: date,
    default_threshold_days: int,
) -> list[ExpiringReceipt]:
    """Filter ``receipts`` down to those inside their notification window.

    Receipts owned by opted-out users are dropped. A receipt expiring in
    exactly the threshold number of days is kept.
    """

    expiring: list[ExpiringReceipt] = []
    for receipt in receipts:
        expiration = ensure_utc(receipt.warranty_expiration_date)
        if expiration is None:
            continue

        owner = receipt.owner
        if owner is not None and owner.opt_out_of_notifications:
            logger.debug(
                "Skipping receipt %s - user %s opted out of notifications",
                receipt.id,
                receipt.user_id,
            )
            continue

        days_until_expiration = (expiration.date() - today).days
        if days_until_expiration <= 0:
            continue

        threshold = effective_threshold(owner, default_threshold_days)
        if days_until_expiration > threshold:
            continue

        expiring.append(
            ExpiringReceipt(
                notification=WarrantyNotification(
                    user_id=receipt.user_id,
                    user_email=(owner.email if owner and owner.email else UNKNOWN_EMAIL),
                    product_name=receipt.display_label,
                    expiration_date=expiration,
                    receipt_id=receipt.id,
                    days_until_expiration=days_until_expiration,
                ),
                owner=owner,
            )
        )
    return expiring


def select_unnotified(
    expiring: Sequence[ExpiringReceipt], notified_receipts: frozenset[str]
) -> list[ExpiringReceipt]:
    """Return the entries whose receipt has not triggered a notification yet."""

    pending: list[ExpiringReceipt] = []
    for item in expiring:
        if item.notification.receipt_id in notified_receipts:
            logger.debug(
                "Skipping notification for receipt %s - already notified",
                item.notification.receipt_id,
            )
            continue
        pending.append(item)
    return pending


__all__ = [
    "ExpiringReceipt",
    "UNKNOWN_EMAIL",
    "detect_expiring_warranties",
    "effective_threshold",
    "query_window",
    "select_unnotified",
]
