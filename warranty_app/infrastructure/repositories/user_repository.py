"""Mapping of stored users to notification profiles."""

from __future__ import annotations

import logging

from warranty_app.domain.entities import NotificationChannel, UserProfile
from warranty_app.infrastructure.models import UserModel

logger = logging.getLogger(__name__)


def user_profile_from_model(model: UserModel) -> UserProfile:
    """Return the notification profile stored on ``model``."""

    return UserProfile(
        id=model.id,
        email=model.email,
        phone_number=model.phone_number,
        notification_channel=_parse_channel(model.notification_channel, user_id=model.id),
        notification_threshold_days=model.notification_threshold_days,
        opt_out_of_notifications=bool(model.opt_out_of_notifications),
    )


def _parse_channel(value: str | None, *, user_id: str) -> NotificationChannel:
    if value is None:
        return NotificationChannel.NONE
    for channel in NotificationChannel:
        if channel.value.lower() == value.strip().lower():
            return channel
    logger.warning(
        "Unknown notification channel %r stored for user %s; notifications disabled",
        value,
        user_id,
    )
    return NotificationChannel.NONE


__all__ = ["user_profile_from_model"]
