"""
autoparts_admin.backends.firebase

Hosted backends: Firebase Authentication + Cloud Firestore (firebase-admin).

Responsibilities:
- Initialize the Firebase Admin app once per process from service-account
  settings (lazy, lock-guarded).
- Map Firebase Auth SDK calls and errors onto `IdentityProvider`.
- Map the Firestore async client onto `DocumentStore`.

Notes:
- The Auth SDK is blocking; calls run in a worker thread via `asyncio.to_thread`.
- Firestore `DocumentReference.delete()` without a precondition succeeds when
  the document does not exist, which is the idempotence `DocumentStore` needs.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials, firestore_async
from google.api_core.exceptions import NotFound

from autoparts_admin.backends.base import (
    CredentialRejectedError,
    DocumentNotFoundError,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
)
from autoparts_admin.observability.logging import get_logger
from autoparts_admin.settings import Settings

log = get_logger(__name__)

_app_lock = threading.Lock()


def _load_credential(settings: Settings) -> credentials.Certificate:
    if settings.firebase_credentials_file:
        return credentials.Certificate(settings.firebase_credentials_file)

    if not (
        settings.firebase_project_id
        and settings.firebase_client_email
        and settings.firebase_private_key
    ):
        raise RuntimeError(
            "Firebase Admin: set AUTOPARTS_FIREBASE_PROJECT_ID, AUTOPARTS_FIREBASE_CLIENT_EMAIL "
            "and AUTOPARTS_FIREBASE_PRIVATE_KEY (or AUTOPARTS_FIREBASE_CREDENTIALS_FILE)"
        )
    return credentials.Certificate(
        {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "client_email": settings.firebase_client_email,
            # Env vars usually carry the PEM newlines escaped.
            "private_key": settings.firebase_private_key.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    )


def get_firebase_app(settings: Settings) -> firebase_admin.App:
    """
    Return the process-wide Firebase app, initializing it on first use.
    The returned app (and clients built from it) is safe to share across requests.
    """

    with _app_lock:
        try:
            return firebase_admin.get_app(settings.firebase_app_name)
        except ValueError:
            pass
        app = firebase_admin.initialize_app(
            _load_credential(settings),
            {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None,
            name=settings.firebase_app_name,
        )
        log.info("firebase_app_initialized", app_name=app.name)
        return app


class FirebaseIdentityProvider:
    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    async def verify_credential(self, token: str) -> str:
        try:
            claims = await asyncio.to_thread(
                firebase_auth.verify_id_token, token, app=self._app, check_revoked=True
            )
        except (
            ValueError,
            firebase_auth.InvalidIdTokenError,
            firebase_auth.UserDisabledError,
            firebase_auth.UserNotFoundError,
        ) as e:
            # Expired and revoked tokens are subclasses of InvalidIdTokenError.
            raise CredentialRejectedError(str(e)) from e
        return str(claims["uid"])

    async def create_identity(self, *, email: str, display_name: str) -> str:
        try:
            record = await asyncio.to_thread(
                firebase_auth.create_user,
                email=email,
                display_name=display_name or None,
                app=self._app,
            )
        except firebase_auth.EmailAlreadyExistsError as e:
            raise IdentityAlreadyExistsError(email) from e
        return record.uid

    async def delete_identity(self, uid: str) -> None:
        try:
            await asyncio.to_thread(firebase_auth.delete_user, uid, app=self._app)
        except firebase_auth.UserNotFoundError as e:
            raise IdentityNotFoundError(uid) from e

    async def identity_exists(self, uid: str) -> bool:
        try:
            await asyncio.to_thread(firebase_auth.get_user, uid, app=self._app)
        except firebase_auth.UserNotFoundError:
            return False
        return True

    async def revoke_credentials(self, uid: str) -> None:
        try:
            await asyncio.to_thread(firebase_auth.revoke_refresh_tokens, uid, app=self._app)
        except firebase_auth.UserNotFoundError as e:
            raise IdentityNotFoundError(uid) from e

    async def set_identity_disabled(self, uid: str, disabled: bool) -> None:
        try:
            await asyncio.to_thread(
                firebase_auth.update_user, uid, disabled=disabled, app=self._app
            )
        except firebase_auth.UserNotFoundError as e:
            raise IdentityNotFoundError(uid) from e

    async def ping(self) -> None:
        await asyncio.to_thread(firebase_auth.list_users, max_results=1, app=self._app)


class FirestoreDocumentStore:
    def __init__(self, app: firebase_admin.App) -> None:
        self._client = firestore_async.client(app=app)

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        snap = await self._client.collection(collection).document(doc_id).get()
        if not snap.exists:
            return None
        return snap.to_dict() or {}

    async def set_document(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        await self._client.collection(collection).document(doc_id).set(data)

    async def update_document(
        self, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> None:
        try:
            await self._client.collection(collection).document(doc_id).update(fields)
        except NotFound as e:
            raise DocumentNotFoundError(f"{collection}/{doc_id}") from e

    async def delete_document(self, collection: str, doc_id: str) -> None:
        await self._client.collection(collection).document(doc_id).delete()

    async def list_documents(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        return [
            (snap.id, snap.to_dict() or {})
            async for snap in self._client.collection(collection).stream()
        ]

    async def ping(self) -> None:
        await self._client.collection("_health").limit(1).get()
