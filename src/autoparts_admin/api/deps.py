"""
autoparts_admin.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and the shared backends.
- Assemble per-request domain objects (authenticator, checker, services).
"""

from __future__ import annotations

from fastapi import Depends, Request

from autoparts_admin.accounts.authorization import AuthorizationChecker
from autoparts_admin.accounts.deletion import UserDeletionWorkflow
from autoparts_admin.accounts.service import AccountService
from autoparts_admin.auth.authenticator import Authenticator
from autoparts_admin.backends.base import DocumentStore, IdentityProvider
from autoparts_admin.backends.registry import Backends
from autoparts_admin.settings import Settings, get_settings


def settings_dep(request: Request) -> Settings:
    # `create_app` pins the settings it was built with; fall back to the environment.
    return getattr(request.app.state, "settings", None) or get_settings()


def backends_from_app(request: Request) -> Backends:
    # Built once per process on app startup in `autoparts_admin.api.app.create_app`.
    return request.app.state.backends  # type: ignore[attr-defined]


def identity_dep(backends: Backends = Depends(backends_from_app)) -> IdentityProvider:
    return backends.identity


def documents_dep(backends: Backends = Depends(backends_from_app)) -> DocumentStore:
    return backends.documents


def authenticator_dep(identity: IdentityProvider = Depends(identity_dep)) -> Authenticator:
    return Authenticator(identity)


def checker_dep(
    documents: DocumentStore = Depends(documents_dep),
    settings: Settings = Depends(settings_dep),
) -> AuthorizationChecker:
    return AuthorizationChecker(documents, collection=settings.users_collection)


def account_service_dep(
    identity: IdentityProvider = Depends(identity_dep),
    documents: DocumentStore = Depends(documents_dep),
    settings: Settings = Depends(settings_dep),
) -> AccountService:
    return AccountService(
        identity=identity, documents=documents, collection=settings.users_collection
    )


def deletion_workflow_dep(
    authenticator: Authenticator = Depends(authenticator_dep),
    checker: AuthorizationChecker = Depends(checker_dep),
    identity: IdentityProvider = Depends(identity_dep),
    documents: DocumentStore = Depends(documents_dep),
    settings: Settings = Depends(settings_dep),
) -> UserDeletionWorkflow:
    return UserDeletionWorkflow(
        authenticator=authenticator,
        checker=checker,
        identity=identity,
        documents=documents,
        collection=settings.users_collection,
    )


# --- Module Notes -----------------------------------------------------------
# Domain objects are cheap wrappers over the shared backends, so they are built per
# request; only the backends themselves are process-wide.
