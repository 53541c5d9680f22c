"""Transactional email delivery via SendGrid."""

from __future__ import annotations

import html
import json
import logging
from datetime import datetime
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail

from warranty_app.config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailConfigurationError(RuntimeError):
    """Raised when the SendGrid credentials are missing."""


class EmailDeliveryError(RuntimeError):
    """Raised when SendGrid rejects or fails to accept a message."""


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                help_link = item.get("help")
                if message and help_link:
                    messages.append(f"{message} (help: {help_link})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(status_code: Any, details: str | None) -> str:
    if status_code and details:
        return f"SendGrid API request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid API request failed with status {status_code}"
    if details:
        return f"SendGrid API request failed: {details}"
    return "SendGrid API request failed"


class SendGridEmailSender:
    """Send HTML email through the SendGrid REST API.

    The credentials are checked when the sender is built so a misconfigured
    deployment fails at startup instead of dropping every message.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        if not (settings.sendgrid_api_key and settings.sendgrid_sender):
            raise EmailConfigurationError(
                "SendGrid is not configured; set SENDGRID_API_KEY and SENDGRID_SENDER"
            )
        self._api_key = settings.sendgrid_api_key
        self._sender = settings.sendgrid_sender
        self._sender_name = settings.sendgrid_sender_name
        logger.info("Email delivery initialized with SendGrid sender %s", self._sender)

    def send_email(self, to: str, subject: str, html_body: str) -> None:
        """Deliver one message, raising :class:`EmailDeliveryError` on failure."""

        if not to or not to.strip():
            raise EmailDeliveryError("No recipient email address provided")

        message = Mail(
            from_email=From(self._sender, self._sender_name),
            to_emails=to,
            subject=subject,
            html_content=html_body,
        )

        try:
            client = SendGridAPIClient(self._api_key)
            response = client.send(message)
        except Exception as exc:
            description = _describe_failure(
                getattr(exc, "status_code", None),
                _extract_sendgrid_error_details(getattr(exc, "body", None)),
            )
            logger.error(description)
            raise EmailDeliveryError(description) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            description = _describe_failure(
                status_code,
                _extract_sendgrid_error_details(getattr(response, "body", None)),
            )
            logger.error(description)
            raise EmailDeliveryError(description)

        logger.info("Email sent to %s with subject: %s", to, subject)


def _urgency(days_until_expiration: int) -> tuple[str, str]:
    if days_until_expiration <= 3:
        return "URGENT", "#dc3545"
    if days_until_expiration <= 7:
        return "Important", "#ffc107"
    return "Notice", "#17a2b8"


def build_warranty_expiration_email(
    *,
    product_name: str,
    expiration_date: datetime,
    days_until_expiration: int,
    receipt_id: str,
) -> tuple[str, str]:
    """Return the subject and HTML body of a warranty expiration reminder."""

    level, color = _urgency(days_until_expiration)
    safe_product = html.escape(product_name)
    plural = "s" if days_until_expiration != 1 else ""
    subject = f"Warranty Expiring Soon: {product_name}"
    html_content = "".join(
        (
            f"<div style='background-color: {color}; color: white; padding: 15px;'>",
            f"<h2 style='margin: 0;'>{level}: Warranty Expiring Soon</h2>",
            "</div>",
            f"<p>Your warranty for <strong>{safe_product}</strong> will expire in:</p>",
            f"<h1 style='color: {color};'>{days_until_expiration} Day{plural}</h1>",
            f"<p>Expiration Date: {expiration_date:%B %d, %Y}</p>",
            "<h3>What should you do?</h3>",
            "<ul>",
            "<li>Review your receipt and warranty terms</li>",
            "<li>Contact the manufacturer or retailer about warranty renewal options</li>",
            "<li>Consider extended warranty coverage if available</li>",
            "<li>File any pending warranty claims before expiration</li>",
            "</ul>",
            f"<p><strong>Receipt ID:</strong> {html.escape(receipt_id)}</p>",
            "<p>This is an automated notification from your Warranty Management System.</p>",
        )
    )
    return subject, html_content


__all__ = [
    "EmailConfigurationError",
    "EmailDeliveryError",
    "SendGridEmailSender",
    "build_warranty_expiration_email",
]
