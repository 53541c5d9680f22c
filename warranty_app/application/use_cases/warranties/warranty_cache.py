"""Snapshot of expiring warranties and the record of receipts already notified."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta

from warranty_app.domain.entities import WarrantyNotification
from warranty_app.infrastructure.cache import Cache

SNAPSHOT_CACHE_KEY = "warranty_expiration_cache"
NOTIFIED_RECEIPTS_CACHE_KEY = "notified_receipts"


class WarrantyNotificationCache:
    """Typed access to the two cached values shared with API readers.

    Both values are replaced as a whole; the snapshot outlives the check
    interval by ``snapshot_grace`` so readers keep a view if a cycle runs late.
    """

    def __init__(
        self,
        cache: Cache,
        *,
        check_interval: timedelta,
        notified_ttl: timedelta = timedelta(days=30),
        snapshot_grace: timedelta = timedelta(hours=1),
    ) -> None:
        self._cache = cache
        self.snapshot_ttl = check_interval + snapshot_grace
        self.notified_ttl = notified_ttl

    def snapshot(self) -> tuple[WarrantyNotification, ...]:
        return self._cache.get(SNAPSHOT_CACHE_KEY) or ()

    def publish_snapshot(self, notifications: Iterable[WarrantyNotification]) -> None:
        self._cache.set(SNAPSHOT_CACHE_KEY, tuple(notifications), self.snapshot_ttl)

    def notified_receipts(self) -> frozenset[str]:
        return self._cache.get(NOTIFIED_RECEIPTS_CACHE_KEY) or frozenset()

    def store_notified_receipts(self, receipt_ids: Iterable[str]) -> None:
        self._cache.set(
            NOTIFIED_RECEIPTS_CACHE_KEY, frozenset(receipt_ids), self.notified_ttl
        )

    def for_user(self, user_id: str) -> list[WarrantyNotification]:
        """Return ``user_id``'s expiring warranties, soonest first."""

        return sorted(
            (item for item in self.snapshot() if item.user_id == user_id),
            key=lambda item: item.expiration_date,
        )

    def count_for_user(self, user_id: str) -> int:
        return sum(1 for item in self.snapshot() if item.user_id == user_id)


__all__ = [
    "NOTIFIED_RECEIPTS_CACHE_KEY",
    "SNAPSHOT_CACHE_KEY",
    "WarrantyNotificationCache",
]
