"""Background monitor that notifies users about expiring warranties."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from anyio import to_thread

from warranty_app.config import Settings, get_settings
from warranty_app.domain.entities import Receipt
from warranty_app.infrastructure.cache import Cache, memory_cache
from warranty_app.infrastructure.scheduler import RepeatingTask
from warranty_app.utils import today_utc

from .detect_expiring import detect_expiring_warranties, query_window, select_unnotified
from .dispatch import LoggingNotifier, NotificationRouter, WarrantyNotifier
from .warranty_cache import WarrantyNotificationCache

logger = logging.getLogger(__name__)

ReceiptFinder = Callable[[date, date], Sequence[Receipt]]


@dataclass(frozen=True)
class CheckSummary:
    """Counts produced by one detection cycle."""

    expiring: int
    notified: int


def find_expiring_receipts(start: date, end: date) -> Sequence[Receipt]:
    """Load candidate receipts using a short-lived database session."""

    from warranty_app.infrastructure.database import SessionLocal
    from warranty_app.infrastructure.repositories import ReceiptRepository

    session = SessionLocal()
    try:
        return ReceiptRepository(session).find_expiring_between(start, end)
    finally:
        session.close()


class WarrantyExpirationMonitor:
    """Detect expiring warranties, notify once per receipt and publish the snapshot."""

    def __init__(
        self,
        *,
        notifier: WarrantyNotifier,
        cache: WarrantyNotificationCache,
        find_receipts: ReceiptFinder = find_expiring_receipts,
        default_threshold_days: int = 7,
        check_interval: timedelta = timedelta(hours=24),
        startup_delay: timedelta = timedelta(minutes=1),
    ) -> None:
        self._notifier = notifier
        self.cache = cache
        self._find_receipts = find_receipts
        self._default_threshold_days = default_threshold_days
        self._cycle_lock = asyncio.Lock()
        self._task = RepeatingTask(
            self.check_and_notify,
            interval=check_interval,
            initial_delay=startup_delay,
            name="Warranty expiration monitor",
        )
        logger.info(
            "Warranty expiration monitor configured. Check interval: %s, notification "
            "threshold: %s days",
            check_interval,
            default_threshold_days,
        )

    @property
    def running(self) -> bool:
        return self._task.running

    def start(self) -> None:
        self._task.start()

    async def stop(self) -> None:
        logger.info("Warranty expiration monitor is stopping")
        await self._task.stop()

    async def run_once(self) -> bool:
        """Run one guarded cycle the way the background loop does."""

        return await self._task.run_once()

    async def check_and_notify(self, today: date | None = None) -> CheckSummary:
        """Run one detection cycle.

        Cycles never overlap, so a manual check cannot race the scheduled one.
        A failing receipt query propagates; the previously published snapshot
        and notified set are left untouched in that case.
        """

        async with self._cycle_lock:
            return await self._run_cycle(today or today_utc())

    async def _run_cycle(self, today: date) -> CheckSummary:
        logger.info("Starting warranty expiration check...")

        start, end = query_window(today)
        receipts = await to_thread.run_sync(self._find_receipts, start, end)
        expiring = detect_expiring_warranties(
            receipts, today=today, default_threshold_days=self._default_threshold_days
        )

        if not expiring:
            logger.info("No warranties inside their notification window")
            self.cache.publish_snapshot(())
            return CheckSummary(expiring=0, notified=0)

        logger.info("Found %s warranties inside their notification window", len(expiring))

        notified = set(self.cache.notified_receipts())
        sent = 0
        try:
            for item in select_unnotified(expiring, frozenset(notified)):
                notification = item.notification
                if item.owner is None:
                    logger.warning(
                        "User %s not found, cannot send notifications", notification.user_id
                    )
                else:
                    await self._notifier.dispatch(
                        item.owner,
                        notification.product_name,
                        notification.expiration_date,
                        notification.receipt_id,
                        today=today,
                    )
                    logger.info(
                        "Sent notification for receipt %s - %s expiring in %s days",
                        notification.receipt_id,
                        notification.product_name,
                        notification.days_until_expiration,
                    )
                notified.add(notification.receipt_id)
                sent += 1
        finally:
            self.cache.store_notified_receipts(notified)

        self.cache.publish_snapshot(entry.notification for entry in expiring)
        logger.info(
            "Warranty expiration check completed. %s new notifications sent, %s total expiring",
            sent,
            len(expiring),
        )
        return CheckSummary(expiring=len(expiring), notified=sent)


def build_notifier(settings: Settings) -> WarrantyNotifier:
    """Return the notifier selected by ``NOTIFICATION_BACKEND``."""

    if settings.notification_backend == "log":
        return LoggingNotifier()

    from warranty_app.infrastructure.email import SendGridEmailSender
    from warranty_app.infrastructure.sms import TwilioSmsSender

    return NotificationRouter(SendGridEmailSender(settings), TwilioSmsSender(settings))


def build_warranty_cache(
    settings: Settings | None = None, cache: Cache | None = None
) -> WarrantyNotificationCache:
    settings = settings or get_settings()
    return WarrantyNotificationCache(
        cache or memory_cache,
        check_interval=timedelta(hours=settings.check_interval_hours),
        notified_ttl=timedelta(days=settings.notified_receipts_ttl_days),
    )


def build_warranty_monitor(
    settings: Settings | None = None,
    *,
    notifier: WarrantyNotifier | None = None,
    warranty_cache: WarrantyNotificationCache | None = None,
) -> WarrantyExpirationMonitor:
    """Create the monitor from application settings."""

    settings = settings or get_settings()
    return WarrantyExpirationMonitor(
        notifier=notifier or build_notifier(settings),
        cache=warranty_cache or build_warranty_cache(settings),
        default_threshold_days=settings.notification_days_threshold,
        check_interval=timedelta(hours=settings.check_interval_hours),
        startup_delay=timedelta(seconds=settings.warranty_monitor_startup_delay_seconds),
    )


__all__ = [
    "CheckSummary",
    "WarrantyExpirationMonitor",
    "build_notifier",
    "build_warranty_cache",
    "build_warranty_monitor",
    "find_expiring_receipts",
]
