"""
autoparts_admin.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Keep production migration workflow separate (Alembic).
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine

from autoparts_admin.db import models  # noqa: F401  # ensure models are registered on metadata
from autoparts_admin.db.base import DocumentBase, IdentityBase


async def _create_all(engine: AsyncEngine, metadata: MetaData) -> None:
    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


async def init_identity_db(engine: AsyncEngine) -> None:
    await _create_all(engine, IdentityBase.metadata)


async def init_document_db(engine: AsyncEngine) -> None:
    await _create_all(engine, DocumentBase.metadata)


# --- Module Notes -----------------------------------------------------------
# This helper is intentionally not used for prod. Production workflows should run
# Alembic migrations as part of deployment.
