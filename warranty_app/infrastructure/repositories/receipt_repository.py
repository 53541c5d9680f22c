"""Persistence helpers for receipt entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time, timedelta

from sqlalchemy.orm import Session, joinedload

from warranty_app.domain.entities import Receipt
from warranty_app.infrastructure.models import ReceiptModel

from .user_repository import user_profile_from_model


class ReceiptRepository:
    """Query receipts together with their owners."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_expiring_between(self, start: date, end: date) -> Sequence[Receipt]:
        """Return receipts whose warranty expires after ``start`` and on or before ``end``.

        Both bounds are calendar dates; the time of day stored with the
        expiration is ignored.
        """

        lower = datetime.combine(start + timedelta(days=1), time.min)
        upper = datetime.combine(end + timedelta(days=1), time.min)
        query = (
            self.session.query(ReceiptModel)
            .options(joinedload(ReceiptModel.user))
            .filter(ReceiptModel.warranty_expiration_date.is_not(None))
            .filter(ReceiptModel.warranty_expiration_date >= lower)
            .filter(ReceiptModel.warranty_expiration_date < upper)
            .order_by(ReceiptModel.warranty_expiration_date.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: ReceiptModel) -> Receipt:
        return Receipt(
            id=str(model.id),
            user_id=model.user_id,
            product_name=model.product_name,
            description=model.description,
            warranty_expiration_date=model.warranty_expiration_date,
            owner=user_profile_from_model(model.user) if model.user else None,
        )


__all__ = ["ReceiptRepository"]
