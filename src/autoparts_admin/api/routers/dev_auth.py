from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_404_NOT_FOUND

from autoparts_admin.accounts.models import UserProfile
from autoparts_admin.accounts.service import AccountService
from autoparts_admin.api.deps import account_service_dep, identity_dep, settings_dep
from autoparts_admin.backends.base import IdentityNotFoundError, IdentityProvider
from autoparts_admin.backends.sql import SqlIdentityDirectory
from autoparts_admin.errors import UserNotFound
from autoparts_admin.observability.logging import get_logger
from autoparts_admin.settings import Settings

log = get_logger(__name__)


def _dev_only(settings: Settings = Depends(settings_dep)) -> None:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")


router = APIRouter(prefix="/v1/dev", tags=["dev"], dependencies=[Depends(_dev_only)])


class DevSignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    display_name: str = Field(default="", max_length=256, alias="displayName")


class DevTokenRequest(BaseModel):
    uid: str = Field(min_length=1, max_length=128)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/users", response_model=UserProfile, status_code=201)
async def dev_signup(
    body: DevSignupRequest,
    svc: AccountService = Depends(account_service_dep),
) -> UserProfile:
    # Role is left to the bootstrap rule: first user is admin, the rest are viewers.
    return await svc.provision(email=body.email, display_name=body.display_name)


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    identity: IdentityProvider = Depends(identity_dep),
    svc: AccountService = Depends(account_service_dep),
) -> DevTokenResponse:
    # Hosted providers issue their own ID tokens; only the built-in directory can mint.
    if not isinstance(identity, SqlIdentityDirectory):
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    try:
        token = await identity.issue_credential(body.uid, ttl=timedelta(minutes=body.ttl_minutes))
    except IdentityNotFoundError as e:
        raise UserNotFound() from e

    try:
        await svc.record_login(body.uid)
    except UserNotFound:
        # Tokens for profile-less identities are useful for exercising authorization.
        log.info("dev_token_without_profile", user_id=body.uid)
    return DevTokenResponse(access_token=token)
