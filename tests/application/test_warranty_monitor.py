"""Tests for the warranty expiration monitor cycle."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta

import pytest

from warranty_app.application.use_cases.warranties import (
    LoggingNotifier,
    NotificationRouter,
    WarrantyExpirationMonitor,
    WarrantyNotificationCache,
    build_notifier,
    build_warranty_monitor,
)
from warranty_app.config import Settings
from warranty_app.domain.entities import NotificationChannel, Receipt, UserProfile
from warranty_app.infrastructure.cache import MemoryCache

TODAY = date(2026, 10, 19)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta.total_seconds()


class RecordingNotifier:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    async def dispatch(self, profile, product_name, expiration_date, receipt_id, *, today=None):
        self.calls.append((profile.id, receipt_id))


def _owner(user_id: str = "user-1", **overrides) -> UserProfile:
    return UserProfile(
        id=user_id,
        email=f"{user_id}@example.com",
        phone_number="+15551234567",
        notification_channel=NotificationChannel.EMAIL_AND_SMS,
        **overrides,
    )


def _receipt(receipt_id: str, days: int, owner: UserProfile | None, user_id: str = "user-1"):
    return Receipt(
        id=receipt_id,
        user_id=owner.id if owner else user_id,
        product_name="Laptop",
        description=None,
        warranty_expiration_date=datetime.combine(TODAY + timedelta(days=days), time(9)),
        owner=owner,
    )


def _monitor(receipts, *, notifier=None, clock=None, find_receipts=None):
    cache = WarrantyNotificationCache(
        MemoryCache(clock=clock), check_interval=timedelta(hours=24)
    )
    monitor = WarrantyExpirationMonitor(
        notifier=notifier or RecordingNotifier(),
        cache=cache,
        find_receipts=find_receipts or (lambda start, end: list(receipts)),
        default_threshold_days=7,
        check_interval=timedelta(hours=24),
        startup_delay=timedelta(seconds=0),
    )
    return monitor


def test_back_to_back_cycles_notify_once() -> None:
    notifier = RecordingNotifier()
    monitor = _monitor([_receipt("r-1", 5, _owner())], notifier=notifier)

    first = asyncio.run(monitor.check_and_notify(TODAY))
    second = asyncio.run(monitor.check_and_notify(TODAY))

    assert notifier.calls == [("user-1", "r-1")]
    assert (first.expiring, first.notified) == (1, 1)
    assert (second.expiring, second.notified) == (1, 0)
    assert [item.receipt_id for item in monitor.cache.snapshot()] == ["r-1"]
    assert monitor.cache.notified_receipts() == frozenset({"r-1"})


def test_query_window_is_passed_to_finder() -> None:
    seen: list[tuple[date, date]] = []

    def find_receipts(start: date, end: date):
        seen.append((start, end))
        return []

    monitor = _monitor([], find_receipts=find_receipts)
    asyncio.run(monitor.check_and_notify(TODAY))

    assert seen == [(TODAY, TODAY + timedelta(days=90))]


def test_empty_cycle_clears_snapshot() -> None:
    receipts = [_receipt("r-1", 5, _owner())]
    monitor = _monitor(receipts)
    asyncio.run(monitor.check_and_notify(TODAY))

    receipts.clear()
    summary = asyncio.run(monitor.check_and_notify(TODAY))

    assert (summary.expiring, summary.notified) == (0, 0)
    assert monitor.cache.snapshot() == ()


def test_notified_set_expires_after_ttl() -> None:
    clock = FakeClock()
    notifier = RecordingNotifier()
    monitor = _monitor([_receipt("r-1", 5, _owner())], notifier=notifier, clock=clock)

    asyncio.run(monitor.check_and_notify(TODAY))
    clock.advance(timedelta(days=30, seconds=1))
    asyncio.run(monitor.check_and_notify(TODAY))

    assert notifier.calls == [("user-1", "r-1"), ("user-1", "r-1")]


def test_opted_out_user_is_never_notified() -> None:
    notifier = RecordingNotifier()
    owner = _owner(opt_out_of_notifications=True)
    monitor = _monitor([_receipt("r-1", 2, owner)], notifier=notifier)

    asyncio.run(monitor.check_and_notify(TODAY))

    assert notifier.calls == []
    assert monitor.cache.snapshot() == ()


def test_missing_owner_is_marked_without_dispatch(caplog: pytest.LogCaptureFixture) -> None:
    notifier = RecordingNotifier()
    monitor = _monitor([_receipt("r-9", 3, None, user_id="ghost")], notifier=notifier)

    with caplog.at_level(logging.WARNING):
        asyncio.run(monitor.check_and_notify(TODAY))

    assert notifier.calls == []
    assert "User ghost not found" in caplog.text
    assert monitor.cache.notified_receipts() == frozenset({"r-9"})
    [row] = monitor.cache.snapshot()
    assert row.user_email == "unknown@example.com"


def test_overlapping_checks_notify_once() -> None:
    class SlowNotifier(RecordingNotifier):
        async def dispatch(self, profile, product_name, expiration_date, receipt_id, *, today=None):
            await asyncio.sleep(0.05)
            await super().dispatch(profile, product_name, expiration_date, receipt_id)

    notifier = SlowNotifier()
    monitor = _monitor([_receipt("r-1", 5, _owner())], notifier=notifier)

    async def scenario() -> None:
        await asyncio.gather(monitor.check_and_notify(TODAY), monitor.check_and_notify(TODAY))

    asyncio.run(scenario())

    assert notifier.calls == [("user-1", "r-1")]


def test_query_failure_keeps_previous_state() -> None:
    state = {"fail": False}
    receipts = [_receipt("r-1", 5, _owner())]

    def find_receipts(start: date, end: date):
        if state["fail"]:
            raise RuntimeError("database unavailable")
        return receipts

    monitor = _monitor([], find_receipts=find_receipts)
    asyncio.run(monitor.check_and_notify(TODAY))
    state["fail"] = True

    with pytest.raises(RuntimeError):
        asyncio.run(monitor.check_and_notify(TODAY))

    assert [item.receipt_id for item in monitor.cache.snapshot()] == ["r-1"]
    assert monitor.cache.notified_receipts() == frozenset({"r-1"})


def test_run_once_reports_failure(caplog: pytest.LogCaptureFixture) -> None:
    def find_receipts(start: date, end: date):
        raise RuntimeError("database unavailable")

    monitor = _monitor([], find_receipts=find_receipts)

    with caplog.at_level(logging.ERROR):
        assert asyncio.run(monitor.run_once()) is False

    assert "cycle failed" in caplog.text


def test_failure_mid_cycle_keeps_progress() -> None:
    class FailingSecondNotifier(RecordingNotifier):
        async def dispatch(self, profile, product_name, expiration_date, receipt_id, *, today=None):
            if self.calls:
                raise RuntimeError("boom")
            await super().dispatch(profile, product_name, expiration_date, receipt_id)

    notifier = FailingSecondNotifier()
    receipts = [_receipt("r-1", 2, _owner()), _receipt("r-2", 3, _owner())]
    monitor = _monitor(receipts, notifier=notifier)

    with pytest.raises(RuntimeError):
        asyncio.run(monitor.check_and_notify(TODAY))

    assert monitor.cache.notified_receipts() == frozenset({"r-1"})


def test_snapshot_only_holds_receipts_inside_threshold() -> None:
    receipts = [
        _receipt("soon", 7, _owner()),
        _receipt("later", 8, _owner()),
        _receipt("custom", 25, _owner("user-2", notification_threshold_days=30)),
    ]
    monitor = _monitor(receipts)

    asyncio.run(monitor.check_and_notify(TODAY))

    assert sorted(item.receipt_id for item in monitor.cache.snapshot()) == ["custom", "soon"]


def test_background_loop_runs_and_stops() -> None:
    notifier = RecordingNotifier()
    monitor = _monitor([_receipt("r-1", 5, _owner())], notifier=notifier)

    async def scenario() -> None:
        monitor.start()
        assert monitor.running
        for _ in range(100):
            if notifier.calls:
                break
            await asyncio.sleep(0.01)
        await asyncio.wait_for(monitor.stop(), timeout=1)

    asyncio.run(scenario())

    assert notifier.calls == [("user-1", "r-1")]
    assert not monitor.running


def test_build_notifier_uses_log_backend() -> None:
    settings = Settings(secret_key="x", notification_backend="log", _env_file=None)

    assert isinstance(build_notifier(settings), LoggingNotifier)


def test_build_notifier_composite_uses_router() -> None:
    settings = Settings(
        secret_key="x",
        notification_backend="composite",
        sendgrid_api_key="SG.test",
        sendgrid_sender="alerts@example.com",
        _env_file=None,
    )

    assert isinstance(build_notifier(settings), NotificationRouter)


def test_build_warranty_monitor_reads_settings() -> None:
    settings = Settings(
        secret_key="x",
        notification_backend="log",
        notification_days_threshold=14,
        check_interval_hours=6,
        _env_file=None,
    )

    warranty_cache = WarrantyNotificationCache(MemoryCache(), check_interval=timedelta(hours=6))

    monitor = build_warranty_monitor(settings, warranty_cache=warranty_cache)

    assert monitor.cache.snapshot_ttl == timedelta(hours=7)
    assert not monitor.running
