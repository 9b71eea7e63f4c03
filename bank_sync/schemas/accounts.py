from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field


class AccountCreatePayload(BaseModel):
    """
    Schema for creating an account. linked_id may be given up front or set later via the link endpoint.
    """

    name: str = Field(..., min_length=1, description="Display name")
    account_type: str = Field("checking", max_length=50, description="Account type")
    currency: str = Field("EUR", min_length=3, max_length=3, description="ISO-4217 currency code")
    linked_id: Optional[str] = Field(None, description="Aggregation provider account ID")


class AccountLinkPayload(BaseModel):
    """
    Schema for linking an account to the aggregation provider.
    """

    linked_id: str = Field(..., min_length=1, description="Aggregation provider account ID")


class AccountResponse(BaseModel):
    id: int
    name: str
    account_type: str
    currency: str
    linked_id: Optional[str] = None
    is_linked: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AccountResponse":
        return cls(**row, is_linked=bool(row.get("linked_id")))


class AccountSyncResponse(BaseModel):
    account_id: int
    transactions_fetched: int
    transactions_imported: int


class TransactionResponse(BaseModel):
    id: int
    provider_transaction_id: str
    booking_date: Optional[date] = None
    amount: Decimal = Field(..., description="Signed amount; negative for debits")
    currency: Optional[str] = None
    description: str


class TransactionsResponse(BaseModel):
    account_id: int
    transactions: list[TransactionResponse]
