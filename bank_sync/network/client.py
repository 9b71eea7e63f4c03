"""
Client for the bank data aggregation provider.

Requests are issued one at a time with a fixed timeout. There is no retry or
rate limiting here: a failed request surfaces to the caller, which records it
as a per-account failure.
"""

import time
from datetime import date
from typing import Any, Dict, Optional, cast
from urllib.parse import urljoin

import requests
import structlog

from bank_sync.config import PROVIDER_BASE_URL, PROVIDER_TIMEOUT_SECONDS
from bank_sync.metrics import api_latency, api_requests
from bank_sync.network.auth import get_access_token, invalidate_access_token

logger = structlog.get_logger(__name__)


def provider_get(
    path: str,
    endpoint_name: str,
    params: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Issue an authenticated GET against the provider API.

    Args:
        path (str): Path relative to PROVIDER_BASE_URL (e.g. 'accounts/abc/transactions/').
        endpoint_name (str): Low-cardinality name used for metric labels.
        params (Optional[Dict[str, Any]]): Query string parameters.

    Returns:
        Dict[str, Any]: Decoded JSON body.

    Raises:
        requests.RequestException: On network errors and non-2xx responses.
    """
    token = get_access_token()
    url = urljoin(PROVIDER_BASE_URL, path)
    headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}

    logger.debug("provider_request", endpoint=endpoint_name, path=path)

    start_time = time.time()
    try:
        res = requests.get(url, headers=headers, params=params, timeout=PROVIDER_TIMEOUT_SECONDS)
    except requests.RequestException as err:
        api_requests.labels(endpoint=endpoint_name, status_code="error").inc()
        logger.warning("provider_request_error", endpoint=endpoint_name, error=str(err))
        raise
    latency = time.time() - start_time

    api_requests.labels(endpoint=endpoint_name, status_code=str(res.status_code)).inc()
    api_latency.labels(endpoint=endpoint_name).observe(latency)

    if res.status_code == 401:
        # Token expired or revoked on the provider side
        invalidate_access_token()

    if not res.ok:
        logger.warning(
            "provider_request_failed",
            endpoint=endpoint_name,
            status_code=res.status_code,
        )
    res.raise_for_status()
    return cast(Dict[str, Any], res.json())


def fetch_transactions(linked_id: str, date_from: Optional[date] = None) -> Dict[str, Any]:
    """
    Fetch transactions for a linked provider account.

    Args:
        linked_id (str): Provider account identifier.
        date_from (Optional[date]): Earliest booking date to include.

    Returns:
        Dict[str, Any]: The provider's transactions object with 'booked' and 'pending' lists.
    """
    params = {"date_from": date_from.isoformat()} if date_from else None
    payload = provider_get(
        f"accounts/{linked_id}/transactions/",
        endpoint_name="transactions",
        params=params,
    )
    transactions = payload.get("transactions") or {}
    return {
        "booked": list(transactions.get("booked", [])),
        "pending": list(transactions.get("pending", [])),
    }
