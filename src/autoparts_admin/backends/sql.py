"""
autoparts_admin.backends.sql

Built-in identity directory and document store on SQLAlchemy async.

Responsibilities:
- `SqlIdentityDirectory`: identities table + HS256 credentials (PyJWT),
  re-checking the directory on every verification.
- `SqlDocumentStore`: JSON documents keyed by (collection, document id).
- Scope one session/transaction per call so each store commits on its own.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic_core import to_jsonable_python
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from autoparts_admin.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate, issue_token
from autoparts_admin.backends.base import (
    CredentialRejectedError,
    DocumentNotFoundError,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
)
from autoparts_admin.db.models import utcnow
from autoparts_admin.db.repositories.documents import DocumentRepo
from autoparts_admin.db.repositories.identities import IdentityRepo


def _epoch_seconds(naive_utc: datetime) -> int:
    return int(naive_utc.replace(tzinfo=UTC).timestamp())


class SqlIdentityDirectory:
    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        jwt_cfg: JwtConfig,
        default_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        self._session_factory = session_factory
        self._jwt = jwt_cfg
        self._default_ttl = default_ttl

    async def verify_credential(self, token: str) -> str:
        try:
            claims = decode_and_validate(cfg=self._jwt, token=token)
        except JwtValidationError as e:
            raise CredentialRejectedError(str(e)) from e

        uid = claims.subject
        async with self._session_factory() as session:
            identity = await IdentityRepo(session).get(uid)

        if identity is None:
            raise CredentialRejectedError("identity no longer exists")
        if identity.disabled:
            raise CredentialRejectedError("identity disabled")
        if identity.tokens_valid_after is not None and claims.issued_at < _epoch_seconds(
            identity.tokens_valid_after
        ):
            raise CredentialRejectedError("credential revoked")
        return uid

    async def issue_credential(self, uid: str, *, ttl: timedelta | None = None) -> str:
        async with self._session_factory() as session:
            identity = await IdentityRepo(session).get(uid)
        if identity is None:
            raise IdentityNotFoundError(uid)
        return issue_token(cfg=self._jwt, subject=uid, ttl=ttl or self._default_ttl)

    async def create_identity(self, *, email: str, display_name: str) -> str:
        uid = uuid.uuid4().hex
        try:
            async with self._session_factory.begin() as session:
                repo = IdentityRepo(session)
                if await repo.get_by_email(email) is not None:
                    raise IdentityAlreadyExistsError(email)
                await repo.create(uid=uid, email=email, display_name=display_name)
        except IntegrityError as e:
            # Lost a race with a concurrent create for the same email.
            raise IdentityAlreadyExistsError(email) from e
        return uid

    async def delete_identity(self, uid: str) -> None:
        async with self._session_factory.begin() as session:
            deleted = await IdentityRepo(session).delete(uid)
        if not deleted:
            raise IdentityNotFoundError(uid)

    async def identity_exists(self, uid: str) -> bool:
        async with self._session_factory() as session:
            return await IdentityRepo(session).get(uid) is not None

    async def revoke_credentials(self, uid: str) -> None:
        # Second precision, matching the `iat` claim.
        async with self._session_factory.begin() as session:
            found = await IdentityRepo(session).set_tokens_valid_after(
                uid, utcnow().replace(microsecond=0)
            )
        if not found:
            raise IdentityNotFoundError(uid)

    async def set_identity_disabled(self, uid: str, disabled: bool) -> None:
        async with self._session_factory.begin() as session:
            found = await IdentityRepo(session).set_disabled(uid, disabled)
        if not found:
            raise IdentityNotFoundError(uid)

    async def ping(self) -> None:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))


class SqlDocumentStore:
    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        async with self._session_factory() as session:
            doc = await DocumentRepo(session).get(collection, doc_id)
        return dict(doc.data) if doc is not None else None

    async def set_document(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        async with self._session_factory.begin() as session:
            await DocumentRepo(session).upsert(collection, doc_id, to_jsonable_python(data))

    async def update_document(
        self, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> None:
        async with self._session_factory.begin() as session:
            repo = DocumentRepo(session)
            doc = await repo.get(collection, doc_id)
            if doc is None:
                raise DocumentNotFoundError(f"{collection}/{doc_id}")
            # Reassign (not mutate) so the JSON column is flagged dirty.
            await repo.upsert(collection, doc_id, {**doc.data, **to_jsonable_python(fields)})

    async def delete_document(self, collection: str, doc_id: str) -> None:
        async with self._session_factory.begin() as session:
            await DocumentRepo(session).delete(collection, doc_id)

    async def list_documents(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        async with self._session_factory() as session:
            docs = await DocumentRepo(session).list_for_collection(collection)
        return [(d.doc_id, dict(d.data)) for d in docs]

    async def ping(self) -> None:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))


# --- Module Notes -----------------------------------------------------------
# `delete_document` never checks existence first; that is what makes the
# profile cleanup after a partial deletion safe to retry.
