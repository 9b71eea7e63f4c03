from typing import Any

import structlog
from sqlalchemy import insert, select
from sqlalchemy.engine import Connection

from bank_sync.models.transactions import Transaction
from bank_sync.normalizers.transactions import normalize_transactions

logger = structlog.get_logger(__name__)


def insert_transactions(conn: Connection, account_id: int, booked: list[dict[str, Any]]) -> int:
    """
    Import booked provider transactions for an account, skipping known ones.

    A transaction is known when the account already has a row with the same
    provider transactionId. Entries without a transactionId are ignored.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside a transaction).
        account_id (int): Local account ID.
        booked (list[dict[str, Any]]): Booked transactions from the provider.

    Returns:
        int: Number of newly inserted transactions.
    """
    rows = normalize_transactions(booked)
    if not rows:
        return 0

    incoming = [row["provider_transaction_id"] for row in rows]
    known = set(
        conn.execute(
            select(Transaction.provider_transaction_id).where(
                Transaction.account_id == account_id,
                Transaction.provider_transaction_id.in_(incoming),
            )
        ).scalars()
    )

    new_rows = [
        {**row, "account_id": account_id}
        for row in rows
        if row["provider_transaction_id"] not in known
    ]
    if new_rows:
        conn.execute(insert(Transaction), new_rows)

    logger.info(
        "transactions_imported",
        account_id=account_id,
        received=len(booked),
        inserted=len(new_rows),
        skipped=len(rows) - len(new_rows),
    )
    return len(new_rows)


def delete_account_transactions(conn: Connection, account_id: int) -> None:
    """Remove every imported transaction of an account."""
    conn.execute(Transaction.__table__.delete().where(Transaction.account_id == account_id))
