"""
autoparts_admin.errors

Error taxonomy for user administration.

Responsibilities:
- Define one exception type per failure kind, each with a stable error code
  and the HTTP status it maps to.
- Render the public response body. 401/403 bodies carry only a human-readable
  message; the concrete reason is logged, never returned.
"""

from __future__ import annotations

from typing import Any

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class AccountError(Exception):
    code: str = "internal_error"
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal error"

    def __init__(self, message: str | None = None, *, details: str | None = None) -> None:
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.status_code >= HTTP_500_INTERNAL_SERVER_ERROR and self.details:
            body["details"] = self.details
        return body


class MissingTarget(AccountError):
    code = "missing_target"
    status_code = HTTP_400_BAD_REQUEST
    message = "Missing userId"


class Unauthenticated(AccountError):
    code = "unauthenticated"
    status_code = HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class InvalidCredential(AccountError):
    code = "invalid_credential"
    status_code = HTTP_401_UNAUTHORIZED
    message = "Invalid or expired token"


class SelfDeletionForbidden(AccountError):
    code = "self_deletion_forbidden"
    status_code = HTTP_403_FORBIDDEN
    message = "Cannot delete your own account"


class ProfileNotFound(AccountError):
    code = "profile_not_found"
    status_code = HTTP_403_FORBIDDEN
    message = "Caller profile not found"


class PermissionDenied(AccountError):
    code = "permission_denied"
    status_code = HTTP_403_FORBIDDEN
    message = "Forbidden"


class TargetNotFound(AccountError):
    code = "target_not_found"
    status_code = HTTP_404_NOT_FOUND
    message = "User not found"


class UserNotFound(AccountError):
    code = "user_not_found"
    status_code = HTTP_404_NOT_FOUND
    message = "User not found"


class EmailAlreadyExists(AccountError):
    code = "email_already_exists"
    status_code = HTTP_409_CONFLICT
    message = "A user with this email already exists"


class CleanupRefused(AccountError):
    code = "cleanup_refused"
    status_code = HTTP_409_CONFLICT
    message = "Authentication record still exists; delete the user instead"


class InternalError(AccountError):
    code = "internal_error"
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to delete user"


class PartialDeletion(AccountError):
    """
    The authentication record of `target_id` is gone but its profile document
    is not. Remediation is an idempotent retry of the document deletion only.
    """

    code = "partial_deletion"
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    message = "User removed from authentication service but profile deletion failed"

    def __init__(self, *, target_id: str, failed_step: str, details: str | None = None) -> None:
        super().__init__(details=details)
        self.target_id = target_id
        self.failed_step = failed_step

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["partial"] = {
            "failed_step": self.failed_step,
            "auth_record_removed": True,
            "document_removed": False,
            "remediation": f"DELETE /v1/admin/users/{self.target_id}/profile",
        }
        return body


# --- Module Notes -----------------------------------------------------------
# `api.errors.account_error_handler` is the only place these become HTTP responses.
