"""
autoparts_admin.accounts.authorization

Authorization checks against the caller's stored profile.

Responsibilities:
- Forbid self-deletion before touching any store.
- Load the caller's profile; a missing profile is an authorization failure.
- Require a capability flag; inactive, malformed, or flag-less profiles are denied.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from autoparts_admin.accounts.models import MANAGE_USERS, UserProfile
from autoparts_admin.auth.models import CallerIdentity
from autoparts_admin.backends.base import DocumentStore
from autoparts_admin.errors import PermissionDenied, ProfileNotFound, SelfDeletionForbidden
from autoparts_admin.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AuthorizationGrant:
    """
    Proof that `caller_id` passed the check for `capability` on `target_id`.
    Only `AuthorizationChecker` should construct these.
    """

    caller_id: str
    target_id: str
    capability: str


class AuthorizationChecker:
    def __init__(self, documents: DocumentStore, *, collection: str = "users") -> None:
        self._documents = documents
        self._collection = collection

    async def load_profile(self, caller: CallerIdentity) -> UserProfile:
        data = await self._documents.get_document(self._collection, caller.uid)
        if data is None:
            log.info("authorization_denied", caller_id=caller.uid, reason="profile_missing")
            raise ProfileNotFound()
        try:
            return UserProfile.from_document(caller.uid, data)
        except ValidationError as e:
            log.warning("authorization_denied", caller_id=caller.uid, reason="profile_malformed")
            raise PermissionDenied() from e

    async def require_capability(self, caller: CallerIdentity, capability: str) -> UserProfile:
        profile = await self.load_profile(caller)
        if not profile.is_active:
            log.info("authorization_denied", caller_id=caller.uid, reason="inactive")
            raise PermissionDenied()
        if not profile.permissions.grants(capability):
            log.info(
                "authorization_denied",
                caller_id=caller.uid,
                reason="missing_capability",
                capability=capability,
            )
            raise PermissionDenied()
        return profile

    async def authorize_deletion(
        self, caller: CallerIdentity, target_id: str
    ) -> AuthorizationGrant:
        # Checked first: no permission level makes self-deletion acceptable.
        if caller.uid == target_id:
            log.info("authorization_denied", caller_id=caller.uid, reason="self_deletion")
            raise SelfDeletionForbidden()
        await self.require_capability(caller, MANAGE_USERS)
        return AuthorizationGrant(caller_id=caller.uid, target_id=target_id, capability=MANAGE_USERS)
