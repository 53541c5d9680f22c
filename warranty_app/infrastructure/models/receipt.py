"""SQLAlchemy model for stored receipts."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import relationship

from warranty_app.infrastructure.database import Base


class ReceiptModel(Base):
    """Database representation of an uploaded purchase receipt."""

    __tablename__ = "receipt"
    __table_args__ = (
        Index("ix_receipt_warranty_expiration_date", "warranty_expiration_date"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(64), ForeignKey("user.id"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False, default="")
    description = Column(String(500), nullable=True)
    product_name = Column(String(200), nullable=True)
    merchant = Column(String(200), nullable=True)
    purchase_date = Column(DateTime, nullable=True)
    warranty_expiration_date = Column(DateTime, nullable=True)
    uploaded_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("UserModel", lazy="joined")


__all__ = ["ReceiptModel"]
