"""
tests.test_user_admin

Profile management routes (`/v1/admin/users`, `/v1/account`) over the in-memory backends.
"""

from __future__ import annotations

from datetime import datetime

import httpx
import pytest
from conftest import ADMIN_PERMISSIONS, FakeDocumentStore, FakeIdentityProvider, bearer


@pytest.fixture
def admin_token(identity: FakeIdentityProvider, documents: FakeDocumentStore) -> str:
    token = identity.add("U1", "owner@example.com")
    documents.docs[("users", "U1")] = {
        "email": "owner@example.com",
        "role": "admin",
        "permissions": ADMIN_PERMISSIONS,
    }
    return token


@pytest.mark.asyncio
async def test_admin_routes_require_manage_users(
    client: httpx.AsyncClient, identity: FakeIdentityProvider, documents: FakeDocumentStore
) -> None:
    token = identity.add("U5")
    documents.docs[("users", "U5")] = {"role": "viewer", "permissions": {"canViewStats": True}}

    assert (await client.get("/v1/admin/users")).status_code == 401
    assert (await client.get("/v1/admin/users", headers=bearer(token))).status_code == 403
    r = await client.post(
        "/v1/admin/users", json={"email": "x@example.com"}, headers=bearer(token)
    )
    assert r.status_code == 403
    assert identity.calls_named("create_identity") == []


@pytest.mark.asyncio
async def test_list_skips_malformed_profiles(
    client: httpx.AsyncClient, documents: FakeDocumentStore, admin_token: str
) -> None:
    documents.docs[("users", "U2")] = {"email": "clerk@example.com", "role": "viewer"}
    documents.docs[("users", "U3")] = {"email": "odd@example.com", "role": "superuser"}

    r = await client.get("/v1/admin/users", headers=bearer(admin_token))

    assert r.status_code == 200
    assert [u["id"] for u in r.json()] == ["U1", "U2"]


@pytest.mark.asyncio
async def test_create_user_writes_identity_and_profile(
    client: httpx.AsyncClient,
    identity: FakeIdentityProvider,
    documents: FakeDocumentStore,
    admin_token: str,
) -> None:
    r = await client.post(
        "/v1/admin/users",
        json={"email": "buyer@example.com", "displayName": "Buyer", "role": "manager"},
        headers=bearer(admin_token),
    )

    assert r.status_code == 201
    body = r.json()
    assert body["role"] == "manager"
    assert body["displayName"] == "Buyer"
    assert body["permissions"]["canEditProducts"] is True
    assert body["permissions"]["canManageUsers"] is False
    assert body["isActive"] is True
    assert identity.uids[body["id"]] == "buyer@example.com"
    assert documents.docs[("users", body["id"])]["email"] == "buyer@example.com"
    assert isinstance(documents.docs[("users", body["id"])]["createdAt"], datetime)


@pytest.mark.asyncio
async def test_create_user_rejects_bad_email(
    client: httpx.AsyncClient, identity: FakeIdentityProvider, admin_token: str
) -> None:
    r = await client.post(
        "/v1/admin/users", json={"email": "not an email"}, headers=bearer(admin_token)
    )

    assert r.status_code == 422
    assert identity.calls_named("create_identity") == []


@pytest.mark.asyncio
async def test_profile_write_failure_undoes_identity(
    client: httpx.AsyncClient,
    identity: FakeIdentityProvider,
    documents: FakeDocumentStore,
    admin_token: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def _broken_set(collection: str, doc_id: str, data: dict) -> None:
        raise ConnectionError("store unavailable")

    monkeypatch.setattr(documents, "set_document", _broken_set)

    r = await client.post(
        "/v1/admin/users", json={"email": "buyer@example.com"}, headers=bearer(admin_token)
    )

    assert r.status_code == 500
    assert r.json()["error"] == "Failed to create user"
    assert "buyer@example.com" not in identity.uids.values()


@pytest.mark.asyncio
async def test_get_unknown_user_is_404(client: httpx.AsyncClient, admin_token: str) -> None:
    r = await client.get("/v1/admin/users/nobody", headers=bearer(admin_token))

    assert r.status_code == 404
    assert r.json()["code"] == "user_not_found"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "path"),
    [("GET", "/v1/admin/users/U9"), ("POST", "/v1/admin/users/U9/activate")],
)
async def test_unparseable_profile_is_500_with_error_body(
    client: httpx.AsyncClient,
    documents: FakeDocumentStore,
    admin_token: str,
    method: str,
    path: str,
) -> None:
    documents.docs[("users", "U9")] = {"email": "u9@example.com", "role": "owner"}

    r = await client.request(method, path, headers=bearer(admin_token))

    assert r.status_code == 500
    assert r.json()["code"] == "internal_error"
    assert r.json()["error"] == "Malformed user profile"
    assert "role" in r.json()["details"]


@pytest.mark.asyncio
async def test_role_change_resets_permissions(
    client: httpx.AsyncClient, documents: FakeDocumentStore, admin_token: str
) -> None:
    documents.docs[("users", "U2")] = {
        "role": "viewer",
        "permissions": {"canViewStats": True, "canExportData": True},
    }

    r = await client.put(
        "/v1/admin/users/U2/role", json={"role": "viewer"}, headers=bearer(admin_token)
    )

    assert r.status_code == 200
    assert r.json()["permissions"]["canExportData"] is False
    assert r.json()["updatedAt"] is not None
    # Handed to the store as a datetime, which Firestore keeps as a Timestamp.
    assert isinstance(documents.docs[("users", "U2")]["updatedAt"], datetime)


@pytest.mark.asyncio
async def test_custom_permissions_are_stored_camel_case(
    client: httpx.AsyncClient, documents: FakeDocumentStore, admin_token: str
) -> None:
    documents.docs[("users", "U2")] = {"role": "viewer"}

    r = await client.put(
        "/v1/admin/users/U2/permissions",
        json={"canManageCategories": True, "canManageUsers": "yes"},
        headers=bearer(admin_token),
    )

    assert r.status_code == 200
    stored = documents.docs[("users", "U2")]["permissions"]
    assert stored["canManageCategories"] is True
    assert stored["canManageUsers"] is False


@pytest.mark.asyncio
async def test_deactivate_revokes_and_activate_restores(
    client: httpx.AsyncClient,
    identity: FakeIdentityProvider,
    documents: FakeDocumentStore,
    admin_token: str,
) -> None:
    identity.add("U2")
    documents.docs[("users", "U2")] = {"role": "viewer"}

    off = await client.post("/v1/admin/users/U2/deactivate", headers=bearer(admin_token))
    disabled_while_off = "U2" in identity.disabled
    on = await client.post("/v1/admin/users/U2/activate", headers=bearer(admin_token))

    assert off.json()["isActive"] is False
    assert on.json()["isActive"] is True
    assert identity.calls_named("revoke_credentials") == [("revoke_credentials", "U2")]
    assert disabled_while_off
    assert "U2" not in identity.disabled
    assert identity.calls_named("set_identity_disabled") == [
        ("set_identity_disabled", "U2", True),
        ("set_identity_disabled", "U2", False),
    ]


@pytest.mark.asyncio
async def test_deactivate_profile_without_identity(
    client: httpx.AsyncClient, documents: FakeDocumentStore, admin_token: str
) -> None:
    documents.docs[("users", "U9")] = {"role": "viewer"}

    r = await client.post("/v1/admin/users/U9/deactivate", headers=bearer(admin_token))

    assert r.status_code == 200
    assert documents.docs[("users", "U9")]["isActive"] is False


@pytest.mark.asyncio
async def test_inactive_admin_is_denied(
    client: httpx.AsyncClient, documents: FakeDocumentStore, admin_token: str
) -> None:
    documents.docs[("users", "U1")]["isActive"] = False

    r = await client.get("/v1/admin/users", headers=bearer(admin_token))

    assert r.status_code == 403


@pytest.mark.asyncio
async def test_account_returns_own_profile(
    client: httpx.AsyncClient, identity: FakeIdentityProvider, documents: FakeDocumentStore
) -> None:
    token = identity.add("U7", "viewer@example.com")
    documents.docs[("users", "U7")] = {
        "email": "viewer@example.com",
        "displayName": "Viewer",
        "photoURL": "https://cdn.example.com/u7.png",
    }

    r = await client.get("/v1/account", headers=bearer(token))

    assert r.status_code == 200
    body = r.json()
    assert body["id"] == "U7"
    assert body["role"] == "viewer"
    assert body["photoURL"] == "https://cdn.example.com/u7.png"
    assert body["permissions"]["canManageUsers"] is False


@pytest.mark.asyncio
async def test_account_without_profile_is_403(
    client: httpx.AsyncClient, identity: FakeIdentityProvider
) -> None:
    token = identity.add("U8")

    r = await client.get("/v1/account", headers=bearer(token))

    assert r.status_code == 403
    assert r.json()["code"] == "profile_not_found"
