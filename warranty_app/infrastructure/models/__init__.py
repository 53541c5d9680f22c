"""ORM models used by the application infrastructure."""

from .receipt import ReceiptModel
from .user import UserModel

__all__ = [
    "ReceiptModel",
    "UserModel",
]
