"""Domain entities for phone number verification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class VerificationCodeEntry:
    """Outstanding verification code issued to a single user."""

    code: str
    phone_number: str
    expires_at: datetime
    attempt_count: int = 0

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of issuing or checking a verification code."""

    success: bool
    message: str


__all__ = ["VerificationCodeEntry", "VerificationResult"]
