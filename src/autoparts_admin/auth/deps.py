"""
autoparts_admin.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert the Authorization header into a verified `CallerIdentity`.
- Enforce capability flags from the caller's profile via dependency factories.
"""

from __future__ import annotations

from fastapi import Depends, Header

from autoparts_admin.accounts.authorization import AuthorizationChecker
from autoparts_admin.accounts.models import UserProfile
from autoparts_admin.api.deps import authenticator_dep, checker_dep
from autoparts_admin.auth.authenticator import Authenticator
from autoparts_admin.auth.models import CallerIdentity


async def get_caller(
    authorization: str | None = Header(default=None),
    authenticator: Authenticator = Depends(authenticator_dep),
) -> CallerIdentity:
    return await authenticator.authenticate(authorization)


async def get_caller_profile(
    caller: CallerIdentity = Depends(get_caller),
    checker: AuthorizationChecker = Depends(checker_dep),
) -> UserProfile:
    return await checker.load_profile(caller)


def require_capability(capability: str):
    async def _dep(
        caller: CallerIdentity = Depends(get_caller),
        checker: AuthorizationChecker = Depends(checker_dep),
    ) -> UserProfile:
        return await checker.require_capability(caller, capability)

    return _dep


# --- Module Notes -----------------------------------------------------------
# The user deletion route does not use these: it hands the raw header to
# `UserDeletionWorkflow` so a missing target is rejected before authentication.
