"""
FastAPI dependency injection providers.

Dependencies can be overridden in tests using app.dependency_overrides, e.g.
an in-memory engine or a fresh SyncRunTracker per test.
"""

from __future__ import annotations

from typing import Generator

from sqlalchemy.engine import Engine

from bank_sync.db.engine import engine
from bank_sync.services.progress import SyncRunTracker, sync_tracker


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide the database engine.

    Yields:
        Engine: SQLAlchemy database engine

    Example:
        >>> @router.get("/accounts")
        >>> def list_accounts_endpoint(engine: Engine = Depends(get_db_engine)):
        ...     with engine.connect() as conn:
        ...         ...
    """
    yield engine


def get_sync_tracker() -> SyncRunTracker:
    """Provide the process-wide bulk sync tracker."""
    return sync_tracker
