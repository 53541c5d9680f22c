"""Helpers to keep personal data out of log records."""

from __future__ import annotations


def mask_phone_number(phone_number: str | None) -> str:
    """Return ``phone_number`` with everything but the last four digits hidden."""

    if not phone_number or not phone_number.strip() or len(phone_number) < 4:
        return "****"
    return f"****{phone_number[-4:]}"
