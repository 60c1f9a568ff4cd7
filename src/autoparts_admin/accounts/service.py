"""
autoparts_admin.accounts.service

Profile management for the admin panel.

Responsibilities:
- List and fetch user profiles.
- Provision an identity + profile (the first user ever becomes admin).
- Change roles, custom permissions, and activation state.
- Remove a leftover profile document after a partial deletion.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from autoparts_admin.accounts.models import DEFAULT_PERMISSIONS, Permissions, Role, UserProfile
from autoparts_admin.backends.base import (
    DocumentNotFoundError,
    DocumentStore,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
    IdentityProvider,
)
from autoparts_admin.errors import CleanupRefused, EmailAlreadyExists, InternalError, UserNotFound
from autoparts_admin.observability.logging import get_logger

log = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


class AccountService:
    def __init__(
        self,
        *,
        identity: IdentityProvider,
        documents: DocumentStore,
        collection: str = "users",
    ) -> None:
        self._identity = identity
        self._documents = documents
        self._collection = collection

    async def list_users(self) -> list[UserProfile]:
        profiles: list[UserProfile] = []
        for doc_id, data in await self._documents.list_documents(self._collection):
            try:
                profiles.append(UserProfile.from_document(doc_id, data))
            except ValidationError:
                log.warning("profile_skipped_malformed", user_id=doc_id)
        return profiles

    async def get_user(self, uid: str) -> UserProfile:
        data = await self._documents.get_document(self._collection, uid)
        if data is None:
            raise UserNotFound()
        try:
            return UserProfile.from_document(uid, data)
        except ValidationError as e:
            log.warning("profile_malformed", user_id=uid)
            raise InternalError("Malformed user profile", details=str(e)) from e

    async def provision(
        self,
        *,
        email: str,
        display_name: str = "",
        role: Role | None = None,
    ) -> UserProfile:
        if role is None:
            # Bootstrap: whoever registers first administers the store.
            existing = await self._documents.list_documents(self._collection)
            role = Role.admin if not existing else Role.viewer

        try:
            uid = await self._identity.create_identity(email=email, display_name=display_name)
        except IdentityAlreadyExistsError as e:
            raise EmailAlreadyExists() from e

        now = _now()
        profile = UserProfile(
            id=uid,
            email=email,
            display_name=display_name or email.split("@")[0],
            role=role,
            permissions=DEFAULT_PERMISSIONS[role],
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        try:
            await self._documents.set_document(self._collection, uid, profile.to_document())
        except Exception as e:
            # The identity is brand new and unused, so removing it is a clean undo.
            log.exception("profile_create_failed", user_id=uid)
            try:
                await self._identity.delete_identity(uid)
            except IdentityNotFoundError:
                pass
            raise InternalError("Failed to create user", details=str(e)) from e

        log.info("user_provisioned", user_id=uid, role=role)
        return profile

    async def set_role(self, uid: str, role: Role) -> UserProfile:
        return await self._update(
            uid,
            {"role": role.value, "permissions": DEFAULT_PERMISSIONS[role].to_document()},
        )

    async def set_permissions(self, uid: str, permissions: Permissions) -> UserProfile:
        return await self._update(uid, {"permissions": permissions.to_document()})

    async def set_active(self, uid: str, active: bool) -> UserProfile:
        profile = await self._update(uid, {"isActive": active})
        try:
            await self._identity.set_identity_disabled(uid, not active)
            if not active:
                await self._identity.revoke_credentials(uid)
        except IdentityNotFoundError:
            log.info("identity_toggle_skipped_no_identity", user_id=uid, active=active)
        return profile

    async def record_login(self, uid: str) -> UserProfile:
        return await self._update(uid, {"lastLogin": _now()})

    async def delete_profile(self, uid: str) -> None:
        if await self._identity.identity_exists(uid):
            raise CleanupRefused()
        await self._documents.delete_document(self._collection, uid)
        log.info("profile_deleted", user_id=uid)

    async def _update(self, uid: str, fields: dict[str, Any]) -> UserProfile:
        try:
            await self._documents.update_document(
                self._collection, uid, {**fields, "updatedAt": _now()}
            )
        except DocumentNotFoundError as e:
            raise UserNotFound() from e
        return await self.get_user(uid)


# --- Module Notes -----------------------------------------------------------
# Deletion of a whole user is not here: it spans both systems and lives in
# `accounts.deletion`.
