"""SMS delivery via Twilio."""

from __future__ import annotations

import logging
from datetime import datetime

from twilio.rest import Client

from warranty_app.config import Settings, get_settings
from warranty_app.utils import mask_phone_number

logger = logging.getLogger(__name__)

SMS_MAX_LENGTH = 1600


class TwilioSmsSender:
    """Send text messages through Twilio.

    SMS is optional: without credentials the sender stays usable and every
    ``send_sms`` call reports ``False``.
    """

    def __init__(self, settings: Settings | None = None, client: Client | None = None) -> None:
        settings = settings or get_settings()
        self._from_number = settings.twilio_from_number
        self._client = client
        if client is None and settings.twilio_configured:
            self._client = Client(settings.twilio_account_sid, settings.twilio_auth_token)

        if self.is_configured:
            logger.info("SMS delivery initialized with Twilio (from: %s)", self._from_number)
        else:
            logger.warning("SMS delivery not configured - Twilio credentials missing")

    @property
    def is_configured(self) -> bool:
        return self._client is not None and bool(self._from_number)

    def send_sms(self, to: str, body: str) -> bool:
        """Send ``body`` to ``to`` and report whether Twilio accepted it."""

        if not self.is_configured:
            logger.debug("SMS not sent - Twilio not configured")
            return False
        if not to or not to.strip():
            logger.debug("SMS not sent - no phone number provided")
            return False

        try:
            message = self._client.messages.create(
                body=body[:SMS_MAX_LENGTH],
                from_=self._from_number,
                to=to,
            )
        except Exception:
            logger.exception("Failed to send SMS to %s", mask_phone_number(to))
            return False

        if getattr(message, "error_code", None):
            logger.error(
                "Twilio rejected SMS to %s with error %s: %s",
                mask_phone_number(to),
                message.error_code,
                getattr(message, "error_message", None),
            )
            return False

        logger.info("SMS sent to %s (SID: %s)", mask_phone_number(to), message.sid)
        return True


def build_warranty_expiration_sms(
    *, product_name: str, expiration_date: datetime, days_until_expiration: int
) -> str:
    """Return the text of a warranty expiration SMS."""

    urgency = "URGENT: " if days_until_expiration <= 3 else ""
    return (
        f"{urgency}Warranty Alert: Your warranty for '{product_name}' expires in "
        f"{days_until_expiration} day(s) on {expiration_date:%m/%d/%Y}. "
        "Review your coverage options soon."
    )


def build_verification_code_sms(code: str, *, valid_minutes: int) -> str:
    """Return the text carrying a phone verification code."""

    return (
        f"Your warranty app verification code is: {code}. "
        f"Valid for {valid_minutes} minutes."
    )


__all__ = [
    "TwilioSmsSender",
    "build_verification_code_sms",
    "build_warranty_expiration_sms",
]
