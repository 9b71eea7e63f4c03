"""SQLAlchemy model for user bank accounts."""

from sqlalchemy import TIMESTAMP, Column, Integer, String, func

from bank_sync.models.base import Base


class Account(Base):
    """
    ORM model for a bank account tracked by the application.

    linked_id holds the aggregation provider's account identifier once the
    account has been linked; accounts without it are never synced.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    account_type = Column(String(50), nullable=False, server_default="checking")
    currency = Column(String(3), nullable=False, server_default="EUR")
    linked_id = Column(String, nullable=True, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
