# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

TEST_DB_URL = "sqlite://"
TEST_ADMIN_KEY = "test-admin-key"

os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["SLOT_TIMEZONE"] = "UTC"
os.environ["REDIS_URL"] = ""
os.environ.setdefault("ADMIN_KEY", TEST_ADMIN_KEY)

from slot_api.core.settings import settings  # noqa: E402
from slot_api.db.session import Base  # noqa: E402
from slot_api.db.session import get_db as app_get_session  # noqa: E402
from slot_api.main import app as fastapi_app  # noqa: E402
from slot_api.services.config_store import ConfigStore  # noqa: E402
from slot_api.services.rate_limit import get_rate_limiter  # noqa: E402


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    ConfigStore(session).seed_defaults()
    try:
        yield session
    finally:
        session.close()
        # Services commit, so each test cleans up after itself.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture(autouse=True)
def reset_rate_limiter() -> Iterator[None]:
    get_rate_limiter().reset()
    yield
    get_rate_limiter().reset()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    """Return headers carrying the configured admin key."""
    return {"x-admin-key": settings.admin_key}


@pytest.fixture()
def set_config(db_session: Session) -> Callable[..., None]:
    """Return a helper that upserts config values for the current test."""

    def _set(**values: object) -> None:
        ConfigStore(db_session).upsert_many(values)

    return _set
