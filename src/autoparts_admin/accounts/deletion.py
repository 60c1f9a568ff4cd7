"""
autoparts_admin.accounts.deletion

Authorization-gated user deletion across the authentication service and the
document store.

Responsibilities:
- Run one invocation through Start -> Authenticated -> Authorized ->
  AuthDeleted -> Completed, failing terminally from any stage.
- Delete the identity first, then the profile document.
- Report a missing identity as `TargetNotFound` without touching documents.
- Report a document failure after the identity is gone as `PartialDeletion`.
  There is no rollback: a recreated identity would not restore the original
  credentials. The cleanup is an idempotent re-run of the document deletion.
"""

from __future__ import annotations

import enum

from autoparts_admin.accounts.authorization import AuthorizationChecker, AuthorizationGrant
from autoparts_admin.auth.authenticator import Authenticator
from autoparts_admin.backends.base import DocumentStore, IdentityNotFoundError, IdentityProvider
from autoparts_admin.errors import (
    AccountError,
    InternalError,
    MissingTarget,
    PartialDeletion,
    TargetNotFound,
)
from autoparts_admin.observability.logging import get_logger

log = get_logger(__name__)


class DeletionStage(enum.StrEnum):
    start = "START"
    authenticated = "AUTHENTICATED"
    authorized = "AUTHORIZED"
    auth_deleted = "AUTH_DELETED"
    completed = "COMPLETED"


class UserDeletionWorkflow:
    def __init__(
        self,
        *,
        authenticator: Authenticator,
        checker: AuthorizationChecker,
        identity: IdentityProvider,
        documents: DocumentStore,
        collection: str = "users",
    ) -> None:
        self._authenticator = authenticator
        self._checker = checker
        self._identity = identity
        self._documents = documents
        self._collection = collection

    async def run(self, *, authorization: str | None, target_id: str | None) -> DeletionStage:
        if not target_id or not target_id.strip():
            raise MissingTarget()

        stage = DeletionStage.start
        bound = log.bind(target_id=target_id)
        try:
            caller = await self._authenticator.authenticate(authorization)
            stage = DeletionStage.authenticated
            bound = bound.bind(caller_id=caller.uid)

            grant = await self._checker.authorize_deletion(caller, target_id)
            stage = DeletionStage.authorized
            bound.info("user_deletion_authorized")

            stage = await self.delete(grant)
        except AccountError as e:
            bound.warning("user_deletion_failed", stage=stage, code=e.code)
            raise
        except Exception as e:
            bound.exception("user_deletion_failed", stage=stage, code=InternalError.code)
            raise InternalError(details=str(e)) from e

        bound.info("user_deleted", stage=stage)
        return stage

    async def delete(self, grant: AuthorizationGrant) -> DeletionStage:
        target_id = grant.target_id
        try:
            await self._identity.delete_identity(target_id)
        except IdentityNotFoundError as e:
            # The document may belong to a recreated account; leave it alone.
            raise TargetNotFound() from e

        try:
            await self._documents.delete_document(self._collection, target_id)
        except Exception as e:
            partial = PartialDeletion(
                target_id=target_id, failed_step="delete_document", details=str(e)
            )
            # Plain error record (no traceback rendering) ahead of the raise.
            log.error(
                "user_partially_deleted",
                target_id=target_id,
                stage=DeletionStage.auth_deleted,
                failed_step=partial.failed_step,
                error=repr(e),
            )
            raise partial from e

        return DeletionStage.completed


# --- Module Notes -----------------------------------------------------------
# Two concurrent deletions of the same target race at `delete_identity`; the loser
# observes `TargetNotFound`, which is the correct outcome and needs no locking.
