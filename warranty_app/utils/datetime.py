"""Helpers for working with timezone-aware UTC datetimes."""

from __future__ import annotations

from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def today_utc() -> date:
    """Return the current UTC calendar date."""

    return now_utc().date()


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in UTC.

    Naive values are assumed to already be UTC, which is how the receipt
    store persists expiration dates.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
