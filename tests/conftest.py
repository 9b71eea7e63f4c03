"""
Shared pytest fixtures.

Configuration is read at import time, so the environment is prepared here
before any bank_sync module is imported by a test module.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ALLOWED_ORIGINS"] = "*"
os.environ["PROVIDER_SECRET_ID"] = "test-secret-id"
os.environ["PROVIDER_SECRET_KEY"] = "test-secret-key"

from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from bank_sync.cache import token_cache  # noqa: E402
from bank_sync.db.engine import engine  # noqa: E402
from bank_sync.dependencies import get_sync_tracker  # noqa: E402
from bank_sync.models.base import Base  # noqa: E402
from bank_sync.models.transactions import Transaction  # noqa: E402,F401
from bank_sync.services.progress import SyncRunTracker  # noqa: E402
from bank_sync.services.transactions_cache import _transactions  # noqa: E402


@pytest.fixture(autouse=True)
def clear_caches() -> Generator[None, None, None]:
    """Start every test with empty token and transactions caches."""
    token_cache.clear()
    _transactions.clear()
    yield
    token_cache.clear()
    _transactions.clear()


@pytest.fixture
def test_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with a fresh schema for each test."""
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def tracker() -> SyncRunTracker:
    return SyncRunTracker()


@pytest.fixture
def client(test_engine: Engine, tracker: SyncRunTracker) -> Generator[TestClient, None, None]:
    """API client backed by the in-memory database and a private sync tracker."""
    from bank_sync.main import app

    app.dependency_overrides[get_sync_tracker] = lambda: tracker
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
