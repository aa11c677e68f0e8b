"""Utility script to prepare the configured database.

For PostgreSQL the target database is created when missing; for both
backends the tables are created and default config is seeded.
"""
from __future__ import annotations

import argparse
import logging
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from slot_api.core.logging_config import configure_logging
from slot_api.core.settings import settings
from slot_api.db.session import Base, engine_options
from slot_api.services.config_store import ConfigStore

logger = logging.getLogger("slot_api.ensure_db")


def normalize_to_psycopg(uri: str) -> str:
    """Return a Postgres URI suitable for psycopg.connect().

    - Strips quotes and whitespace.
    - Converts SQLAlchemy schemes (postgresql+*) and `postgres` to plain "postgresql".
    """
    uri = (uri or "").strip()
    if (uri.startswith("'") and uri.endswith("'")) or (uri.startswith('"') and uri.endswith('"')):
        uri = uri[1:-1]
    if not uri:
        raise ValueError("DATABASE_URL is empty")

    parts = urlsplit(uri)
    scheme = parts.scheme
    if scheme.startswith("postgresql+") or scheme == "postgres":
        scheme = "postgresql"
    if scheme != "postgresql":
        raise ValueError(f"Not a PostgreSQL URL: {uri!r}")

    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


def _split_db_url(db_url: str) -> tuple[str, str]:
    """Return `(admin_url, target_db)` using the maintenance database."""
    parts = urlsplit(normalize_to_psycopg(db_url))
    target_db = parts.path.lstrip("/") or "postgres"

    if parts.netloc:
        admin_url = urlunsplit(("postgresql", parts.netloc, "/postgres", parts.query, parts.fragment))
    else:
        # hostless/local-socket style
        admin_url = "postgresql:///postgres"

    return admin_url, target_db


def ensure_database_exists(db_url: str) -> None:
    """Create the configured PostgreSQL database if it is missing."""
    admin_url, target_db = _split_db_url(db_url)

    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is None:
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
            logger.info("Created database %s", target_db)
        else:
            logger.info("Database %s already exists", target_db)


def prepare_schema(sqlalchemy_url: str) -> list[str]:
    """Create tables and seed default config; returns the seeded keys."""
    engine = create_engine(sqlalchemy_url, **engine_options(sqlalchemy_url))
    try:
        Base.metadata.create_all(bind=engine)
        with Session(engine) as session:
            return ConfigStore(session).seed_defaults()
    finally:
        engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Ensure the configured database is ready")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    parser.add_argument(
        "--skip-schema",
        action="store_true",
        help="Only create the PostgreSQL database; do not create tables or seed config.",
    )
    args = parser.parse_args()
    configure_logging(settings.log_level)

    raw_url = args.url or settings.database_url_sync
    try:
        sqlalchemy_url = raw_url
        if not raw_url.startswith("sqlite"):
            ensure_database_exists(raw_url)
            sqlalchemy_url = normalize_to_psycopg(raw_url).replace(
                "postgresql://", "postgresql+psycopg://", 1
            )
        if not args.skip_schema:
            seeded = prepare_schema(sqlalchemy_url)
            logger.info("Schema ready; seeded %d config keys", len(seeded))
    except (ValueError, psycopg.Error, SQLAlchemyError) as exc:
        logger.error("ensure_db failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
