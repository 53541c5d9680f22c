"""Domain entities exposed by the application."""

from .receipt import DEFAULT_PRODUCT_LABEL, Receipt
from .user import NotificationChannel, UserProfile
from .verification_code import VerificationCodeEntry, VerificationResult
from .warranty_notification import WarrantyNotification

__all__ = [
    "DEFAULT_PRODUCT_LABEL",
    "NotificationChannel",
    "Receipt",
    "UserProfile",
    "VerificationCodeEntry",
    "VerificationResult",
    "WarrantyNotification",
]
