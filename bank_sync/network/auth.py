import time
from typing import Any, cast
from urllib.parse import urljoin

import requests
import structlog

from bank_sync.cache import token_cache
from bank_sync.config import (
    PROVIDER_BASE_URL,
    PROVIDER_SECRET_ID,
    PROVIDER_SECRET_KEY,
    PROVIDER_TIMEOUT_SECONDS,
)
from bank_sync.metrics import api_latency, api_requests

logger = structlog.get_logger(__name__)

TOKEN_ENDPOINT = "token/new/"

# Refresh a little before the provider expires the token
TOKEN_EXPIRY_MARGIN_SECONDS = 60


def create_access_token(secret_id: str, secret_key: str) -> tuple[str, int]:
    """
    Exchange the provider secret id and key for an access token.

    Args:
        secret_id (str): Provider API secret id.
        secret_key (str): Provider API secret key.

    Returns:
        tuple[str, int]: Access token and its lifetime in seconds.

    Raises:
        requests.RequestException: If the token request fails.
        RuntimeError: If the response carries no access token.
    """
    logger.info("provider_token_requested", secret_id=secret_id)

    start_time = time.time()
    try:
        response = requests.post(
            urljoin(PROVIDER_BASE_URL, TOKEN_ENDPOINT),
            json={"secret_id": secret_id, "secret_key": secret_key},
            headers={"Accept": "application/json"},
            timeout=PROVIDER_TIMEOUT_SECONDS,
        )
    except requests.RequestException:
        api_requests.labels(endpoint="token", status_code="error").inc()
        raise
    api_requests.labels(endpoint="token", status_code=str(response.status_code)).inc()
    api_latency.labels(endpoint="token").observe(time.time() - start_time)

    if not response.ok:
        logger.error(
            "provider_token_request_failed",
            status_code=response.status_code,
            response_text=response.text[:200],
        )
        response.raise_for_status()

    payload = cast(dict[str, Any], response.json())
    token = payload.get("access")
    if not isinstance(token, str):
        logger.error("provider_token_missing", response_text=response.text[:200])
        raise RuntimeError("No access token in provider response.")

    expires_in = int(payload.get("access_expires") or 0)
    return token, expires_in


def get_access_token() -> str:
    """
    Get a valid provider access token.

    Checks the token cache first and requests a new token on a miss.

    Returns:
        str: Bearer access token

    Raises:
        RuntimeError: If provider credentials are not configured.
    """
    if not PROVIDER_SECRET_ID or not PROVIDER_SECRET_KEY:
        raise RuntimeError("PROVIDER_SECRET_ID and PROVIDER_SECRET_KEY must be configured")

    cached_token = token_cache.get(PROVIDER_SECRET_ID)
    if cached_token:
        logger.debug("provider_token_cache_hit")
        return cached_token

    logger.debug("provider_token_cache_miss")
    token, expires_in = create_access_token(PROVIDER_SECRET_ID, PROVIDER_SECRET_KEY)

    if expires_in > TOKEN_EXPIRY_MARGIN_SECONDS:
        token_cache.set(PROVIDER_SECRET_ID, token, ttl_seconds=expires_in - TOKEN_EXPIRY_MARGIN_SECONDS)
    else:
        token_cache.set(PROVIDER_SECRET_ID, token)

    return token


def invalidate_access_token() -> None:
    """Drop the cached token so the next request obtains a fresh one."""
    if PROVIDER_SECRET_ID:
        token_cache.invalidate(PROVIDER_SECRET_ID)
    logger.info("provider_token_invalidated")
