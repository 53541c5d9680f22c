"""Repository implementations for infrastructure layer."""

from .receipt_repository import ReceiptRepository
from .user_repository import user_profile_from_model

__all__ = [
    "ReceiptRepository",
    "user_profile_from_model",
]
