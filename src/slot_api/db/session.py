"""Database session configuration.

The same ORM core runs against either backend selected by `DATABASE_URL`:
an embedded SQLite file (default) or a pooled PostgreSQL server.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from slot_api.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import slot_api.models  # noqa: E402,F401

_MEMORY_SQLITE_URLS = {"sqlite://", "sqlite:///:memory:"}


def engine_options(url: str) -> dict[str, Any]:
    """Return backend-specific `create_engine` keyword arguments."""
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in _MEMORY_SQLITE_URLS:
            # A single shared connection keeps the in-memory database alive.
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
    }


engine = create_engine(
    settings.database_url_sync,
    echo=settings.sql_debug,
    **engine_options(settings.database_url_sync),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
