"""
autoparts_admin.db.base

SQLAlchemy declarative bases.

Responsibilities:
- Provide one DeclarativeBase per store so each store owns its own metadata.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class IdentityBase(DeclarativeBase):
    pass


class DocumentBase(DeclarativeBase):
    pass


# --- Module Notes -----------------------------------------------------------
# Alembic selects one of these metadata objects per run (`alembic --name identities` or `--name documents`).
