"""
SQLAlchemy engine singleton.

PostgreSQL gets a pooled engine sized for concurrent web requests. SQLite is
accepted for local development and tests; an in-memory SQLite database shares
one connection across threads so every session sees the same data.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from bank_sync.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")


def build_engine(database_url: str) -> Engine:
    """
    Create an engine with settings suited to the database backend.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Engine: Configured engine
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_size=10,  # Connections kept open in the pool
        max_overflow=20,  # Extra connections allowed under load
        pool_pre_ping=True,  # Detect stale connections before use
        pool_recycle=3600,
        echo=False,
    )


engine: Engine = build_engine(DATABASE_URL)


def check_engine_health() -> bool:
    """
    Check if the database is reachable.

    Used by the /ready endpoint.

    Returns:
        bool: True if a trivial query succeeds, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
