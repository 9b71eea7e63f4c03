from typing import Any

from sqlalchemy import select
from sqlalchemy.engine import Connection

from bank_sync.models.transactions import Transaction


def list_transactions(conn: Connection, account_id: int) -> list[dict[str, Any]]:
    """
    Fetch an account's imported transactions, newest booking date first.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        account_id (int): Local account ID.

    Returns:
        list[dict[str, Any]]: Transaction rows without the raw provider payload.
    """
    stmt = (
        select(
            Transaction.id,
            Transaction.provider_transaction_id,
            Transaction.booking_date,
            Transaction.amount,
            Transaction.currency,
            Transaction.description,
        )
        .where(Transaction.account_id == account_id)
        .order_by(Transaction.booking_date.desc(), Transaction.id.desc())
    )
    return [dict(row) for row in conn.execute(stmt).mappings().all()]
