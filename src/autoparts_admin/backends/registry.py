"""
autoparts_admin.backends.registry

Per-process backend bundle.

Responsibilities:
- Build the identity provider and document store selected by settings.
- Create SQL tables automatically in dev/test.
- Dispose engines on shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncEngine

from autoparts_admin.auth.jwt import JwtConfig
from autoparts_admin.backends.base import DocumentStore, IdentityProvider
from autoparts_admin.backends.firebase import (
    FirebaseIdentityProvider,
    FirestoreDocumentStore,
    get_firebase_app,
)
from autoparts_admin.backends.sql import SqlDocumentStore, SqlIdentityDirectory
from autoparts_admin.db.init_db import init_document_db, init_identity_db
from autoparts_admin.db.session import create_engine, create_sessionmaker
from autoparts_admin.settings import Settings


@dataclass(slots=True)
class Backends:
    """
    One handle per external system, created once and shared by all requests.
    Both handles must tolerate concurrent use; neither holds request state.
    """

    identity: IdentityProvider
    documents: DocumentStore
    engines: tuple[AsyncEngine, ...] = field(default=())

    async def aclose(self) -> None:
        for engine in self.engines:
            await engine.dispose()


async def open_backends(settings: Settings) -> Backends:
    if settings.backend == "firebase":
        app = get_firebase_app(settings)
        return Backends(
            identity=FirebaseIdentityProvider(app),
            documents=FirestoreDocumentStore(app),
        )

    identity_engine = create_engine(settings.identity_database_url)
    document_engine = create_engine(settings.document_database_url)
    if settings.env in ("dev", "test"):
        # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
        await init_identity_db(identity_engine)
        await init_document_db(document_engine)

    return Backends(
        identity=SqlIdentityDirectory(
            session_factory=create_sessionmaker(identity_engine),
            jwt_cfg=JwtConfig.from_settings(settings),
            default_ttl=timedelta(minutes=settings.jwt_ttl_minutes),
        ),
        documents=SqlDocumentStore(session_factory=create_sessionmaker(document_engine)),
        engines=(identity_engine, document_engine),
    )


# --- Module Notes -----------------------------------------------------------
# Called from the app's startup hook; tests pass a prebuilt `Backends` to
# `create_app` instead.
