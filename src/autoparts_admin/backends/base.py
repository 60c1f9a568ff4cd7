"""
autoparts_admin.backends.base

Collaborator interfaces and backend-neutral errors.

Responsibilities:
- `IdentityProvider`: verify credentials and manage identities in the
  authentication service.
- `DocumentStore`: read and write JSON documents by (collection, id).
- Errors every implementation raises instead of SDK-specific exceptions.
"""

from __future__ import annotations

from typing import Any, Protocol


class BackendError(Exception):
    pass


class CredentialRejectedError(BackendError):
    """Credential is malformed, expired, revoked, or names an unknown/disabled identity."""


class IdentityNotFoundError(BackendError):
    pass


class IdentityAlreadyExistsError(BackendError):
    pass


class DocumentNotFoundError(BackendError):
    pass


class IdentityProvider(Protocol):
    async def verify_credential(self, token: str) -> str:
        """Return the uid the credential was issued to."""
        ...

    async def create_identity(self, *, email: str, display_name: str) -> str: ...

    async def delete_identity(self, uid: str) -> None:
        """Raise `IdentityNotFoundError` when `uid` is unknown."""
        ...

    async def identity_exists(self, uid: str) -> bool: ...

    async def revoke_credentials(self, uid: str) -> None: ...

    async def set_identity_disabled(self, uid: str, disabled: bool) -> None:
        """A disabled identity fails `verify_credential` until re-enabled."""
        ...

    async def ping(self) -> None: ...


class DocumentStore(Protocol):
    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    async def set_document(self, collection: str, doc_id: str, data: dict[str, Any]) -> None: ...

    async def update_document(
        self, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> None:
        """Shallow-merge `fields`; raise `DocumentNotFoundError` when absent."""
        ...

    async def delete_document(self, collection: str, doc_id: str) -> None:
        """Idempotent: deleting an absent document succeeds."""
        ...

    async def list_documents(self, collection: str) -> list[tuple[str, dict[str, Any]]]: ...

    async def ping(self) -> None: ...


# --- Module Notes -----------------------------------------------------------
# Implementations must be safe for concurrent use by independent requests; a
# single instance of each is shared for the lifetime of the process.
