"""
autoparts_admin.db.models

Persistence schema for the built-in backends.

Responsibilities:
- Identity: an account known to the authentication directory.
- Document: a JSON document addressed by (collection, document id).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from autoparts_admin.db.base import DocumentBase, IdentityBase


def utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite has no native tz-aware type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class Identity(IdentityBase):
    __tablename__ = "identities"

    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Credentials issued before this instant (second precision) are revoked.
    tokens_valid_after: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class Document(DocumentBase):
    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(128), primary_key=True)
    doc_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)


# --- Module Notes -----------------------------------------------------------
# Profile documents keep the camelCase field names used by the storefront so the
# same documents can be moved to/from Firestore unchanged.
