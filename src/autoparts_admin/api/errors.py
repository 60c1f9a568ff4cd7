"""
autoparts_admin.api.errors

Boundary translation of domain errors into HTTP responses.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_401_UNAUTHORIZED

from autoparts_admin.errors import AccountError


async def account_error_handler(_: Request, exc: AccountError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccountError, account_error_handler)  # type: ignore[arg-type]
