"""
Unit tests for middleware components.
"""

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from bank_sync.middleware import RequestIDMiddleware


@pytest.fixture
def app_with_middleware() -> FastAPI:
    """Create FastAPI app with RequestIDMiddleware for testing."""
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def test_endpoint(request: Request) -> dict[str, str]:
        """Return the request ID seen by the handler and by structlog."""
        bound = structlog.contextvars.get_contextvars().get("request_id", "")
        return {"request_id": request.state.request_id, "bound": bound}

    return app


@pytest.fixture
def client(app_with_middleware: FastAPI) -> TestClient:
    return TestClient(app_with_middleware)


@pytest.mark.unit
def test_request_id_header_matches_state(client: TestClient) -> None:
    response = client.get("/test")

    assert response.status_code == 200
    request_id = response.headers["X-Request-ID"]
    assert len(request_id) == 36  # UUID length
    assert response.json()["request_id"] == request_id


@pytest.mark.unit
def test_request_id_is_bound_to_log_context(client: TestClient) -> None:
    response = client.get("/test")

    assert response.json()["bound"] == response.headers["X-Request-ID"]


@pytest.mark.unit
def test_incoming_request_id_is_reused(client: TestClient) -> None:
    response = client.get("/test", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
    assert response.json()["request_id"] == "abc-123"


@pytest.mark.unit
def test_request_ids_are_unique(client: TestClient) -> None:
    ids = {client.get("/test").headers["X-Request-ID"] for _ in range(5)}

    assert len(ids) == 5
