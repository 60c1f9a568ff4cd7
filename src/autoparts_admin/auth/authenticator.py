"""
autoparts_admin.auth.authenticator

Request authentication.

Responsibilities:
- Extract a bearer credential from a raw Authorization header value.
- Verify it against the identity provider on every call (no caching, so
  revocation takes effect on the next request).
"""

from __future__ import annotations

from autoparts_admin.auth.models import CallerIdentity
from autoparts_admin.backends.base import CredentialRejectedError, IdentityProvider
from autoparts_admin.errors import InvalidCredential, Unauthenticated
from autoparts_admin.observability.logging import get_logger

log = get_logger(__name__)


def extract_bearer(header_value: str | None) -> str | None:
    if not header_value:
        return None
    scheme, _, credential = header_value.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credential.strip() or None


class Authenticator:
    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity

    async def authenticate(self, authorization: str | None) -> CallerIdentity:
        token = extract_bearer(authorization)
        if token is None:
            raise Unauthenticated()

        try:
            uid = await self._identity.verify_credential(token)
        except CredentialRejectedError as e:
            # The reason stays in the logs; the response only says "invalid".
            log.info("credential_rejected", reason=str(e))
            raise InvalidCredential() from e
        return CallerIdentity(uid=uid)
