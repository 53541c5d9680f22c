"""Domain entity representing a purchase receipt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .user import UserProfile

DEFAULT_PRODUCT_LABEL = "Product"


@dataclass(frozen=True)
class Receipt:
    """Read-only view of a receipt and, when available, its owner."""

    id: str
    user_id: str
    product_name: str | None
    description: str | None
    warranty_expiration_date: datetime | None
    owner: UserProfile | None = None

    @property
    def display_label(self) -> str:
        """Return the product name, falling back to the description."""

        for candidate in (self.product_name, self.description):
            if candidate and candidate.strip():
                return candidate
        return DEFAULT_PRODUCT_LABEL


__all__ = ["DEFAULT_PRODUCT_LABEL", "Receipt"]
