from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from bank_sync.models.accounts import Account
from bank_sync.services.outcomes import AccountRef


def get_account(conn: Connection, account_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a single account row.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        account_id (int): Local account ID.

    Returns:
        Optional[dict[str, Any]]: Account columns, or None if not found.
    """
    row = conn.execute(select(Account.__table__).where(Account.id == account_id)).mappings().fetchone()
    return dict(row) if row else None


def list_accounts(conn: Connection) -> list[dict[str, Any]]:
    """
    Fetch every account ordered by ID.

    Args:
        conn (Connection): SQLAlchemy DB connection.

    Returns:
        list[dict[str, Any]]: Account rows.
    """
    rows = conn.execute(select(Account.__table__).order_by(Account.id)).mappings().all()
    return [dict(row) for row in rows]


def list_account_refs(conn: Connection) -> list[AccountRef]:
    """Every account as the read-only view consumed by the sync orchestrator, ordered by ID."""
    return [AccountRef.from_mapping(row) for row in list_accounts(conn)]
