"""
autoparts_admin.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) that pings both external systems.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from autoparts_admin.api.deps import backends_from_app
from autoparts_admin.backends.registry import Backends

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(backends: Backends = Depends(backends_from_app)) -> dict[str, str]:
    # Readiness: both the authentication service and the document store must answer.
    await backends.identity.ping()
    await backends.documents.ping()
    return {"status": "ready"}
