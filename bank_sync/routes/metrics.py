"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP bank_sync_account_syncs_total Total number of single-account sync attempts
        # TYPE bank_sync_account_syncs_total counter
        bank_sync_account_syncs_total{status="success"} 42.0
        ...
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
def metrics() -> Response:
    """Metrics in Prometheus text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
