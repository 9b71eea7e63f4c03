"""SQLAlchemy model for booked transactions imported from the provider."""

from sqlalchemy import (
    JSON,
    TIMESTAMP,
    Column,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)

from bank_sync.models.base import Base


class Transaction(Base):
    """
    A booked transaction of a linked account.

    provider_transaction_id is the provider's transactionId. It is unique per
    account, so re-syncing an overlapping window never imports a transaction
    twice. raw keeps the provider payload as received.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint("account_id", "provider_transaction_id", name="uq_transactions_provider_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider_transaction_id = Column(String, nullable=False)
    booking_date = Column(Date, nullable=True)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=True)
    description = Column(String, nullable=False)
    raw = Column(JSON, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
