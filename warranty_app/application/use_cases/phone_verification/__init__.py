"""Use cases for verifying user phone numbers."""

from .service import (
    CODE_TTL,
    MAX_ATTEMPTS,
    PhoneVerificationService,
    generate_verification_code,
)

__all__ = [
    "CODE_TTL",
    "MAX_ATTEMPTS",
    "PhoneVerificationService",
    "generate_verification_code",
]
