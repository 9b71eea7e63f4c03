"""
Integration tests for single-account sync against the database.
"""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
from sqlalchemy.engine import Engine

from bank_sync.db.readers.transactions import list_transactions
from bank_sync.db.writers.accounts import insert_account
from bank_sync.services.outcomes import AccountRef, SyncOk
from bank_sync.services.sync import sync_account


def provider_listing(*transaction_ids: str) -> dict:
    return {
        "booked": [
            {
                "transactionId": tid,
                "bookingDate": "2024-03-01",
                "transactionAmount": {"amount": "10.00", "currency": "EUR"},
            }
            for tid in transaction_ids
        ],
        "pending": [],
    }


@pytest.mark.integration
@patch("bank_sync.services.sync.fetch_transactions")
def test_resync_imports_only_new_transactions(mock_fetch: Mock, test_engine: Engine) -> None:
    with test_engine.begin() as conn:
        account_id = insert_account(conn, {"name": "Checking", "linked_id": "prov-1"})
    account = AccountRef(account_id, "Checking", "prov-1")

    mock_fetch.return_value = provider_listing("t1", "t2")
    first = sync_account(account, db_engine=test_engine)

    mock_fetch.return_value = provider_listing("t2", "t3")
    second = sync_account(account, db_engine=test_engine)

    assert first == SyncOk(account_id, transactions_fetched=2, transactions_imported=2)
    assert second == SyncOk(account_id, transactions_fetched=2, transactions_imported=1)
    with test_engine.connect() as conn:
        stored = {r["provider_transaction_id"] for r in list_transactions(conn, account_id)}
    assert stored == {"t1", "t2", "t3"}
