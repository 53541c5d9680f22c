"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.sql import expression

from warranty_app.infrastructure.database import Base


class UserModel(Base):
    """Database representation of an application user and its preferences."""

    __tablename__ = "user"

    id = Column(String(64), primary_key=True, index=True)
    email = Column(String(256), nullable=True, index=True)
    phone_number = Column(String(32), nullable=True)
    notification_channel = Column(String(20), nullable=False, default="EmailAndSms")
    notification_threshold_days = Column(Integer, nullable=True)
    opt_out_of_notifications = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["UserModel"]
