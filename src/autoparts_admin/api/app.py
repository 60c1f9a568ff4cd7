"""
autoparts_admin.api.app

FastAPI app factory for the storefront administration service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Open and dispose the shared backends (authentication service + document store).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from fastapi import FastAPI

from autoparts_admin import __version__
from autoparts_admin.api.errors import register_error_handlers
from autoparts_admin.api.routers.account import router as account_router
from autoparts_admin.api.routers.dev_auth import router as dev_auth_router
from autoparts_admin.api.routers.health import router as health_router
from autoparts_admin.api.routers.users import router as users_router
from autoparts_admin.backends.registry import Backends, open_backends
from autoparts_admin.observability.logging import configure_logging, get_logger
from autoparts_admin.observability.middleware import RequestContextMiddleware
from autoparts_admin.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, backends: Backends | None = None) -> FastAPI:
    """
    `backends` lets callers (tests, embedding apps) supply prebuilt clients;
    otherwise they are opened from `settings` at startup.
    """

    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.log_json,
    )

    app = FastAPI(
        title="Auto-parts Store Admin",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.backends = backends

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(users_router)
    app.include_router(account_router)
    app.include_router(dev_auth_router)

    @app.on_event("startup")
    async def _startup() -> None:
        log.info("startup", env=settings.env, backend=settings.backend)
        if app.state.backends is None:
            app.state.backends = await open_backends(settings)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        opened: Backends | None = app.state.backends
        if opened is not None:
            await opened.aclose()
        log.info("shutdown")

    return app


# --- Module Notes -----------------------------------------------------------
# Business rules stay in `accounts`; this module only wires things together.
