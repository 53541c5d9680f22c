"""Domain entity describing how a user wants to be notified."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NotificationChannel(str, Enum):
    """Delivery media a user may opt into."""

    NONE = "None"
    EMAIL_ONLY = "EmailOnly"
    SMS_ONLY = "SmsOnly"
    EMAIL_AND_SMS = "EmailAndSms"

    @property
    def wants_email(self) -> bool:
        return self in (NotificationChannel.EMAIL_ONLY, NotificationChannel.EMAIL_AND_SMS)

    @property
    def wants_sms(self) -> bool:
        return self in (NotificationChannel.SMS_ONLY, NotificationChannel.EMAIL_AND_SMS)


@dataclass(frozen=True)
class UserProfile:
    """Contact data and notification preferences of a receipt owner."""

    id: str
    email: str | None
    phone_number: str | None = None
    notification_channel: NotificationChannel = NotificationChannel.EMAIL_AND_SMS
    notification_threshold_days: int | None = None
    opt_out_of_notifications: bool = False

    @property
    def has_email(self) -> bool:
        return bool(self.email and self.email.strip())

    @property
    def has_phone_number(self) -> bool:
        return bool(self.phone_number and self.phone_number.strip())


__all__ = ["NotificationChannel", "UserProfile"]
