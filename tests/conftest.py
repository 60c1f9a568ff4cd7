"""
tests.conftest

Shared fixtures: in-memory backends that record every call, and an app/client
wired to them.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from autoparts_admin.api.app import create_app
from autoparts_admin.backends.base import (
    CredentialRejectedError,
    DocumentNotFoundError,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
)
from autoparts_admin.backends.registry import Backends
from autoparts_admin.settings import Settings

ADMIN_PERMISSIONS = {"canManageUsers": True, "canViewStats": True}


class FakeIdentityProvider:
    def __init__(self) -> None:
        self.uids: dict[str, str] = {}  # uid -> email
        self.tokens: dict[str, str] = {}  # token -> uid
        self.revoked: set[str] = set()
        self.disabled: set[str] = set()
        self.calls: list[tuple[str, ...]] = []
        self.delete_error: Exception | None = None

    def add(self, uid: str, email: str | None = None) -> str:
        self.uids[uid] = email or f"{uid.lower()}@example.com"
        token = f"token-{uid}"
        self.tokens[token] = uid
        return token

    def calls_named(self, name: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] == name]

    async def verify_credential(self, token: str) -> str:
        self.calls.append(("verify_credential", token))
        uid = self.tokens.get(token)
        if uid is None or uid not in self.uids or uid in self.revoked or uid in self.disabled:
            raise CredentialRejectedError("unknown token")
        return uid

    async def create_identity(self, *, email: str, display_name: str) -> str:
        self.calls.append(("create_identity", email))
        if email in self.uids.values():
            raise IdentityAlreadyExistsError(email)
        uid = f"U{len(self.uids) + 100}"
        self.add(uid, email)
        return uid

    async def delete_identity(self, uid: str) -> None:
        self.calls.append(("delete_identity", uid))
        if self.delete_error is not None:
            raise self.delete_error
        if uid not in self.uids:
            raise IdentityNotFoundError(uid)
        del self.uids[uid]

    async def identity_exists(self, uid: str) -> bool:
        return uid in self.uids

    async def revoke_credentials(self, uid: str) -> None:
        self.calls.append(("revoke_credentials", uid))
        if uid not in self.uids:
            raise IdentityNotFoundError(uid)
        self.revoked.add(uid)

    async def set_identity_disabled(self, uid: str, disabled: bool) -> None:
        self.calls.append(("set_identity_disabled", uid, disabled))
        if uid not in self.uids:
            raise IdentityNotFoundError(uid)
        if disabled:
            self.disabled.add(uid)
        else:
            self.disabled.discard(uid)

    async def ping(self) -> None:
        return None


class FakeDocumentStore:
    def __init__(self) -> None:
        self.docs: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.delete_error: Exception | None = None
        self.get_error: Exception | None = None

    def calls_named(self, name: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] == name]

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        self.calls.append(("get_document", collection, doc_id))
        if self.get_error is not None:
            raise self.get_error
        doc = self.docs.get((collection, doc_id))
        return dict(doc) if doc is not None else None

    async def set_document(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self.calls.append(("set_document", collection, doc_id))
        self.docs[(collection, doc_id)] = dict(data)

    async def update_document(
        self, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> None:
        self.calls.append(("update_document", collection, doc_id))
        if (collection, doc_id) not in self.docs:
            raise DocumentNotFoundError(doc_id)
        self.docs[(collection, doc_id)].update(fields)

    async def delete_document(self, collection: str, doc_id: str) -> None:
        self.calls.append(("delete_document", collection, doc_id))
        if self.delete_error is not None:
            raise self.delete_error
        self.docs.pop((collection, doc_id), None)

    async def list_documents(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        return [(k[1], dict(v)) for k, v in sorted(self.docs.items()) if k[0] == collection]

    async def ping(self) -> None:
        return None


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def documents() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def app(identity: FakeIdentityProvider, documents: FakeDocumentStore) -> FastAPI:
    return create_app(
        settings=Settings(env="test", log_json=False),
        backends=Backends(identity=identity, documents=documents),
    )


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
