"""
alembic.env

Alembic migration environment configuration.

Responsibilities:
- Select the store being migrated from the ini section (`--name identities|documents`).
- Configure offline/online migration execution against the async engine URL.

Notes:
- This module is executed by Alembic, not imported by the FastAPI runtime.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from autoparts_admin.db import models  # noqa: F401  # ensure models are registered on metadata
from autoparts_admin.db.base import DocumentBase, IdentityBase
from autoparts_admin.settings import Settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

_store = config.config_ini_section
if _store not in ("identities", "documents"):
    raise RuntimeError("run alembic with --name identities or --name documents")

target_metadata = IdentityBase.metadata if _store == "identities" else DocumentBase.metadata


def _get_database_url() -> str:
    # Settings honors AUTOPARTS_IDENTITY_DATABASE_URL / AUTOPARTS_DOCUMENT_DATABASE_URL.
    settings = Settings()
    if _store == "identities":
        return settings.identity_database_url
    return settings.document_database_url


def run_migrations_offline() -> None:
    # Offline: emit SQL scripts without a DB connection.
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    # Online: the configured URLs use async drivers, so drive migrations through run_sync.
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = async_engine_from_config(
        configuration, prefix="sqlalchemy.", poolclass=pool.NullPool
    )

    async with connectable.connect() as connection:
        await connection.run_sync(_do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())


# --- Module Notes -----------------------------------------------------------
# Keep this file aligned with SQLAlchemy metadata definitions in `autoparts_admin.db.models`.
