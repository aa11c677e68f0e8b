"""Alembic environment for the drops, streaks and config tables.

The target database is `ALEMBIC_URL` when set, otherwise the URL the app
itself would use (`DATABASE_URL` / `TEST_DATABASE_URL`). `alembic.ini` puts
`src/` on the path so the models import without installing the package.
"""
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from slot_api.core.settings import settings
from slot_api.db.session import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def migration_url() -> str:
    """Return the database URL migrations run against."""
    override = os.getenv("ALEMBIC_URL") or config.get_main_option("sqlalchemy.url")
    return override or settings.database_url_sync


def batch_mode(url: str) -> bool:
    # SQLite rebuilds tables to change constraints.
    return url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL for the configured URL without connecting."""
    url = migration_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=batch_mode(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived, unpooled connection."""
    url = migration_url()
    engine = create_engine(url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=batch_mode(url),
                compare_type=True,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
