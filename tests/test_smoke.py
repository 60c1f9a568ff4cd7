"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app opens its own backends on startup and the readiness probe works.
- Ensure dev-only routes are hidden in production.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from autoparts_admin.api.app import create_app
from autoparts_admin.settings import Settings


def _sqlite_settings(tmp_path: Path, env: str) -> Settings:
    return Settings(
        env=env,
        log_json=False,
        identity_database_url=f"sqlite+aiosqlite:///{tmp_path / 'identities.db'}",
        document_database_url=f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}",
    )


@pytest.mark.asyncio
async def test_health_endpoints(tmp_path: Path) -> None:
    app = create_app(settings=_sqlite_settings(tmp_path, "test"))

    # httpx ASGITransport does not manage lifespan automatically; do it explicitly.
    async with app.router.lifespan_context(app):
        assert app.state.backends is not None
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/healthz")
            assert r.status_code == 200
            assert r.json()["status"] == "ok"

            r = await client.get("/readyz")
            assert r.status_code == 200
            assert r.json()["status"] == "ready"
            assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_dev_routes_hidden_in_prod(tmp_path: Path) -> None:
    settings = _sqlite_settings(tmp_path, "prod")
    app = create_app(settings=settings)

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post("/v1/dev/users", json={"email": "owner@example.com"})
            assert r.status_code == 404
            r = await client.post("/v1/dev/token", json={"uid": "anyone"})
            assert r.status_code == 404


# --- Module Notes -----------------------------------------------------------
# In prod the tables are not auto-created; the dev routes reject before touching them.
