from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from bank_sync.db.writers.transactions import delete_account_transactions
from bank_sync.models.accounts import Account

logger = structlog.get_logger(__name__)


def insert_account(conn: Connection, data: dict[str, Any]) -> int:
    """
    Insert a new account.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        data (dict[str, Any]): Column values; name is required.

    Returns:
        int: ID of the new account.
    """
    now = datetime.now(timezone.utc)
    values = {
        "name": data["name"],
        "account_type": data.get("account_type") or "checking",
        "currency": data.get("currency") or "EUR",
        "linked_id": data.get("linked_id"),
        "created_at": now,
        "updated_at": now,
    }
    result = conn.execute(insert(Account).values(**values).returning(Account.id))
    account_id = int(result.scalar_one())

    logger.info("account_inserted", account_id=account_id)
    return account_id


def set_linked_id(conn: Connection, account_id: int, linked_id: Optional[str]) -> None:
    """
    Link an account to a provider account, or unlink it when linked_id is None.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        account_id (int): Local account ID.
        linked_id (Optional[str]): Provider account identifier.
    """
    now = datetime.now(timezone.utc)

    stmt = (
        update(Account)
        .where(Account.id == account_id)
        .values(linked_id=linked_id, updated_at=now)
    )
    conn.execute(stmt)

    logger.info("account_link_updated", account_id=account_id, linked=linked_id is not None)


def delete_account(conn: Connection, account_id: int) -> None:
    """
    Permanently delete an account and its imported transactions.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        account_id (int): Local account ID.
    """
    delete_account_transactions(conn, account_id)
    conn.execute(delete(Account).where(Account.id == account_id))
