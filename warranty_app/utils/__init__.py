"""Utility helpers for reusable functionality."""

from .datetime import ensure_utc, now_utc, today_utc
from .masking import mask_phone_number

__all__ = [
    "ensure_utc",
    "mask_phone_number",
    "now_utc",
    "today_utc",
]
