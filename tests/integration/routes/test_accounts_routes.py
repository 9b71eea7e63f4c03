"""
Integration tests for account endpoints.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional
from unittest.mock import Mock, patch

import pytest
import requests
from fastapi.testclient import TestClient


def provider_listing(*transaction_ids: str) -> dict:
    return {
        "booked": [
            {
                "transactionId": tid,
                "bookingDate": "2024-03-01",
                "transactionAmount": {"amount": "-12.50", "currency": "EUR"},
                "remittanceInformationUnstructured": f"Payment {tid}",
            }
            for tid in transaction_ids
        ],
        "pending": [],
    }


def create_account(client: TestClient, name: str, linked_id: Optional[str] = None) -> dict[str, Any]:
    response = client.post("/api/accounts", json={"name": name, "linked_id": linked_id})
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
def test_create_and_list_accounts(client: TestClient) -> None:
    first = create_account(client, "Checking", linked_id="prov-1")
    second = create_account(client, "Cash")

    response = client.get("/api/accounts")

    assert response.status_code == 200
    accounts = response.json()
    assert [a["id"] for a in accounts] == [first["id"], second["id"]]
    assert accounts[0]["is_linked"] is True
    assert accounts[0]["currency"] == "EUR"
    assert accounts[1]["is_linked"] is False
    assert accounts[1]["linked_id"] is None


@pytest.mark.integration
def test_create_account_rejects_empty_name(client: TestClient) -> None:
    response = client.post("/api/accounts", json={"name": ""})

    assert response.status_code == 422


@pytest.mark.integration
def test_link_and_unlink_account(client: TestClient) -> None:
    account = create_account(client, "Savings")

    linked = client.post(f"/api/accounts/{account['id']}/link", json={"linked_id": "prov-9"})
    assert linked.status_code == 200
    assert linked.json()["linked_id"] == "prov-9"
    assert linked.json()["is_linked"] is True

    unlinked = client.delete(f"/api/accounts/{account['id']}/link")
    assert unlinked.status_code == 200
    assert unlinked.json()["linked_id"] is None
    assert unlinked.json()["is_linked"] is False


@pytest.mark.integration
def test_link_rejects_empty_linked_id(client: TestClient) -> None:
    account = create_account(client, "Savings")

    response = client.post(f"/api/accounts/{account['id']}/link", json={"linked_id": ""})

    assert response.status_code == 422


@pytest.mark.integration
def test_unknown_account_returns_404(client: TestClient) -> None:
    assert client.post("/api/accounts/999/link", json={"linked_id": "x"}).status_code == 404
    assert client.delete("/api/accounts/999/link").status_code == 404
    assert client.delete("/api/accounts/999").status_code == 404
    assert client.post("/api/accounts/999/sync").status_code == 404
    assert client.get("/api/accounts/999/transactions").status_code == 404


@pytest.mark.integration
def test_delete_account(client: TestClient) -> None:
    account = create_account(client, "Old card")

    response = client.delete(f"/api/accounts/{account['id']}")

    assert response.status_code == 200
    assert client.get("/api/accounts").json() == []


@pytest.mark.integration
@patch("bank_sync.services.sync.fetch_transactions")
def test_sync_single_account_imports_transactions(mock_fetch: Mock, client: TestClient) -> None:
    mock_fetch.return_value = provider_listing("t1", "t2")
    account = create_account(client, "Checking", linked_id="prov-1")

    response = client.post(f"/api/accounts/{account['id']}/sync")

    assert response.status_code == 200
    assert response.json() == {
        "account_id": account["id"],
        "transactions_fetched": 2,
        "transactions_imported": 2,
    }
    assert mock_fetch.call_args[0][0] == "prov-1"

    again = client.post(f"/api/accounts/{account['id']}/sync")
    assert again.json()["transactions_imported"] == 0


@pytest.mark.integration
@patch("bank_sync.services.sync.fetch_transactions")
def test_sync_unlinked_account_returns_400(mock_fetch: Mock, client: TestClient) -> None:
    account = create_account(client, "Cash")

    response = client.post(f"/api/accounts/{account['id']}/sync")

    assert response.status_code == 400
    mock_fetch.assert_not_called()


@pytest.mark.integration
@patch("bank_sync.services.sync.fetch_transactions")
def test_sync_provider_failure_returns_502(mock_fetch: Mock, client: TestClient) -> None:
    mock_fetch.side_effect = requests.ConnectionError("connection refused")
    account = create_account(client, "Checking", linked_id="prov-1")

    response = client.post(f"/api/accounts/{account['id']}/sync")

    assert response.status_code == 502
    assert response.json()["detail"] == "connection refused"


@pytest.mark.integration
@patch("bank_sync.services.sync.fetch_transactions")
def test_sync_provider_rate_limit_returns_429(mock_fetch: Mock, client: TestClient) -> None:
    rate_limited = Mock()
    rate_limited.status_code = 429
    mock_fetch.side_effect = requests.HTTPError("429 Too Many Requests", response=rate_limited)
    account = create_account(client, "Checking", linked_id="prov-1")

    response = client.post(f"/api/accounts/{account['id']}/sync")

    assert response.status_code == 429


@pytest.mark.integration
@patch("bank_sync.services.sync.fetch_transactions")
def test_transactions_listing_serves_imported_rows(mock_fetch: Mock, client: TestClient) -> None:
    """The listing reads what the sync stored and is refreshed after the next sync."""
    account = create_account(client, "Checking", linked_id="prov-1")
    url = f"/api/accounts/{account['id']}/transactions"

    assert client.get(url).json() == {"account_id": account["id"], "transactions": []}

    mock_fetch.return_value = provider_listing("t1")
    client.post(f"/api/accounts/{account['id']}/sync")

    body = client.get(url).json()
    assert [t["provider_transaction_id"] for t in body["transactions"]] == ["t1"]
    assert Decimal(body["transactions"][0]["amount"]) == Decimal("-12.5")
    assert body["transactions"][0]["booking_date"] == "2024-03-01"
    assert body["transactions"][0]["description"] == "Payment t1"

    mock_fetch.return_value = provider_listing("t1", "t2")
    client.post(f"/api/accounts/{account['id']}/sync")

    body = client.get(url).json()
    assert sorted(t["provider_transaction_id"] for t in body["transactions"]) == ["t1", "t2"]


@pytest.mark.integration
def test_transactions_listing_does_not_call_provider(client: TestClient) -> None:
    account = create_account(client, "Cash")

    with patch("bank_sync.network.client.requests.get") as mock_get:
        response = client.get(f"/api/accounts/{account['id']}/transactions")

    assert response.status_code == 200
    mock_get.assert_not_called()
