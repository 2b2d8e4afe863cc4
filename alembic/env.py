"""
alembic.env

Alembic migration environment for the profile database.

Notes:
- Executed by Alembic, not imported by the FastAPI runtime.
- The runtime uses aiosqlite; migrations run on the sync sqlite driver, so the
  URL's async suffix is stripped (`db.session.sync_database_url`).
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from cvdesk_gateway.db import models  # noqa: F401  # registers tables on Base.metadata
from cvdesk_gateway.db.base import Base
from cvdesk_gateway.db.session import sync_database_url
from cvdesk_gateway.settings import Settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _get_database_url() -> str:
    return sync_database_url(os.environ.get("CVDESK_DATABASE_URL") or Settings().database_url)


def run_migrations_offline() -> None:
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
