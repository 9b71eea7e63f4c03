"""
Internal helper functions for account route handlers.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.engine import Connection

from bank_sync.db.readers.accounts import get_account


def get_account_or_404(conn: Connection, account_id: int) -> dict[str, Any]:
    """
    Fetch an account, raise 404 if it does not exist.

    Args:
        conn: Database connection
        account_id: Account ID to fetch

    Returns:
        dict: Account row

    Raises:
        HTTPException: 404 if account doesn't exist
    """
    account = get_account(conn, account_id)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Account {account_id} not found",
        )
    return account


def validate_account_linked_or_400(account: dict[str, Any]) -> None:
    """
    Validate that an account is linked to the aggregation provider.

    Raises:
        HTTPException: 400 if linked_id is missing or empty
    """
    if not account.get("linked_id"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Account {account['id']} is not linked to a bank",
        )
