"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

MAX_NOTIFICATION_THRESHOLD_DAYS = 90


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./warranty.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify JWT bearer tokens", min_length=1
    )

    check_interval_hours: int = Field(
        default=24,
        description="Hours between two warranty expiration checks",
        gt=0,
    )
    notification_days_threshold: int = Field(
        default=7,
        description="Days before expiration at which users without an override are notified",
        ge=1,
        le=MAX_NOTIFICATION_THRESHOLD_DAYS,
    )
    notified_receipts_ttl_days: int = Field(
        default=30,
        description="Days before the set of already notified receipts is evicted",
        gt=0,
    )
    warranty_monitor_enabled: bool = Field(
        default=True,
        description="Start the background warranty monitor with the application",
    )
    warranty_monitor_startup_delay_seconds: float = Field(
        default=60.0,
        description="Seconds to wait before the first warranty check",
        ge=0,
    )
    notification_backend: Literal["composite", "log"] = Field(
        default="composite",
        description="Deliver notifications by email and SMS, or only log them",
    )

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    sendgrid_sender_name: str = Field(
        default="Warranty App",
        description="Display name attached to the sender address",
    )

    twilio_account_sid: str | None = Field(
        default=None, description="Twilio account SID used to send SMS messages"
    )
    twilio_auth_token: str | None = Field(
        default=None, description="Twilio auth token paired with the account SID"
    )
    twilio_from_number: str | None = Field(
        default=None, description="Phone number SMS messages are sent from"
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @model_validator(mode="after")
    def _validate_twilio_credentials(self) -> "Settings":
        values = (
            self.twilio_account_sid,
            self.twilio_auth_token,
            self.twilio_from_number,
        )
        if any(values) and not all(values):
            raise ValueError(
                "TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_FROM_NUMBER must all be "
                "provided to enable SMS"
            )
        return self

    @property
    def twilio_configured(self) -> bool:
        return bool(
            self.twilio_account_sid and self.twilio_auth_token and self.twilio_from_number
        )

    @property
    def sendgrid_configured(self) -> bool:
        return bool(self.sendgrid_api_key and self.sendgrid_sender)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "MAX_NOTIFICATION_THRESHOLD_DAYS",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
