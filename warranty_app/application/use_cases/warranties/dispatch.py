"""Route warranty expiration notices to the channels a user enabled."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from datetime import date, datetime
from functools import partial
from typing import Protocol

from anyio import to_thread

from warranty_app.domain.entities import NotificationChannel, UserProfile
from warranty_app.infrastructure.email import build_warranty_expiration_email
from warranty_app.infrastructure.sms import build_warranty_expiration_sms
from warranty_app.utils import mask_phone_number, today_utc

logger = logging.getLogger(__name__)

EMAIL = "email"
SMS = "sms"


class EmailSender(Protocol):
    def send_email(self, to: str, subject: str, html_body: str) -> None: ...


class SmsSender(Protocol):
    def send_sms(self, to: str, body: str) -> bool: ...


class WarrantyNotifier(Protocol):
    async def dispatch(
        self,
        profile: UserProfile,
        product_name: str,
        expiration_date: datetime,
        receipt_id: str,
        *,
        today: date | None = None,
    ) -> None: ...


def select_channels(
    channel: NotificationChannel, *, has_email: bool, has_phone: bool
) -> tuple[str, ...]:
    """Return the channels to attempt for a preference and the contact data on file."""

    selected: list[str] = []
    if channel.wants_email and has_email:
        selected.append(EMAIL)
    if channel.wants_sms and has_phone:
        selected.append(SMS)
    return tuple(selected)


def _days_until(expiration_date: datetime, today: date | None) -> int:
    return (expiration_date.date() - (today or today_utc())).days


class NotificationRouter:
    """Fan a notice out to email and SMS, isolating each channel's failures."""

    def __init__(self, email_sender: EmailSender | None, sms_sender: SmsSender | None) -> None:
        self._email_sender = email_sender
        self._sms_sender = sms_sender

    async def dispatch(
        self,
        profile: UserProfile,
        product_name: str,
        expiration_date: datetime,
        receipt_id: str,
        *,
        today: date | None = None,
    ) -> None:
        """Send the notice on every enabled channel and wait for all of them.

        Never raises for a channel failure; those are logged and swallowed so
        the remaining channel still gets its attempt.
        """

        channel = profile.notification_channel
        if channel is NotificationChannel.NONE:
            logger.info("User %s has notifications disabled, skipping", profile.id)
            return

        if channel.wants_email and not profile.has_email:
            logger.warning(
                "User %s wants email notifications but has no email address", profile.id
            )
        if channel.wants_sms and not profile.has_phone_number:
            logger.warning(
                "User %s wants SMS notifications but has no phone number configured",
                profile.id,
            )

        days_until_expiration = _days_until(expiration_date, today)
        sends: list[Awaitable[None]] = []
        for selected in select_channels(
            channel, has_email=profile.has_email, has_phone=profile.has_phone_number
        ):
            if selected == EMAIL:
                sends.append(
                    self._send_email(
                        profile.email or "",
                        product_name,
                        expiration_date,
                        days_until_expiration,
                        receipt_id,
                    )
                )
            else:
                sends.append(
                    self._send_sms(
                        profile.phone_number or "",
                        product_name,
                        expiration_date,
                        days_until_expiration,
                    )
                )

        if not sends:
            logger.warning("No notification channels available for user %s", profile.id)
            return

        logger.info(
            "Sending notification for user %s - %s expiring in %s days",
            profile.id,
            product_name,
            days_until_expiration,
        )
        await asyncio.gather(*sends)
        logger.info("Notification completed for user %s", profile.id)

    async def _send_email(
        self,
        email: str,
        product_name: str,
        expiration_date: datetime,
        days_until_expiration: int,
        receipt_id: str,
    ) -> None:
        if self._email_sender is None:
            logger.warning("Email delivery is not available; skipping %s", email)
            return
        subject, body = build_warranty_expiration_email(
            product_name=product_name,
            expiration_date=expiration_date,
            days_until_expiration=days_until_expiration,
            receipt_id=receipt_id,
        )
        try:
            await to_thread.run_sync(
                partial(self._email_sender.send_email, email, subject, body)
            )
        except Exception:
            logger.exception("Failed to send email notification to %s", email)

    async def _send_sms(
        self,
        phone_number: str,
        product_name: str,
        expiration_date: datetime,
        days_until_expiration: int,
    ) -> None:
        if self._sms_sender is None:
            logger.warning(
                "SMS delivery is not available; skipping %s", mask_phone_number(phone_number)
            )
            return
        body = build_warranty_expiration_sms(
            product_name=product_name,
            expiration_date=expiration_date,
            days_until_expiration=days_until_expiration,
        )
        try:
            delivered = await to_thread.run_sync(
                partial(self._sms_sender.send_sms, phone_number, body)
            )
        except Exception:
            logger.exception(
                "Failed to send SMS notification to %s", mask_phone_number(phone_number)
            )
            return
        if not delivered:
            logger.warning(
                "SMS notification to %s was not delivered", mask_phone_number(phone_number)
            )


class LoggingNotifier:
    """Notifier that only writes the notice to the log."""

    async def dispatch(
        self,
        profile: UserProfile,
        product_name: str,
        expiration_date: datetime,
        receipt_id: str,
        *,
        today: date | None = None,
    ) -> None:
        logger.warning(
            "WARRANTY EXPIRATION NOTIFICATION: User %s (%s) - Product '%s' warranty expires "
            "in %s days on %s. Receipt ID: %s",
            profile.id,
            profile.email,
            product_name,
            _days_until(expiration_date, today),
            f"{expiration_date:%Y-%m-%d}",
            receipt_id,
        )


__all__ = [
    "EMAIL",
    "SMS",
    "EmailSender",
    "LoggingNotifier",
    "NotificationRouter",
    "SmsSender",
    "WarrantyNotifier",
    "select_channels",
]
