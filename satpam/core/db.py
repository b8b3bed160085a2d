"""
Database session management for the Satpam backend.

Uses SQLAlchemy 2.x style `Session` and declarative models. Provides a
session factory and dependency helper for use with FastAPI, plus a small
context manager for scripts and seeders.
"""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from .config import env_int, settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": env_int("DB_POOL_SIZE", 5),
        "max_overflow": env_int("DB_MAX_OVERFLOW", 10),
        "pool_recycle": env_int("DB_POOL_RECYCLE_SEC", 1800),
        "pool_timeout": env_int("DB_POOL_TIMEOUT_SEC", 30),
    }


def configure_sqlite(engine) -> None:
    """Turn on foreign keys and let SQLAlchemy own BEGIN so SAVEPOINTs nest.

    pysqlite starts transactions lazily on its own, which breaks
    ``Session.begin_nested``; ON DELETE CASCADE is ignored unless the
    pragma is set per connection.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


# Create SQLAlchemy engine
engine = create_engine(settings.database_url, echo=False, future=True, **_engine_kwargs(settings.database_url))
configure_sqlite(engine)

# Create a configured session factory
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def get_db():
    """Yield a database session for FastAPI dependencies."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class SessionContext:
    """Context manager for database sessions outside of FastAPI."""

    def __enter__(self):
        self.db = SessionLocal()
        return self.db

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.db.close()
