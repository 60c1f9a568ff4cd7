"""
autoparts_admin.api.routers.users

Admin user management endpoints.

Responsibilities:
- Delete a user from the authentication service and the document store.
- Clean up a profile document left behind by a partial deletion.
- List, provision, and edit user profiles (role, permissions, activation).

Every route requires a caller whose profile grants `canManageUsers`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, ConfigDict, Field

from autoparts_admin.accounts.deletion import UserDeletionWorkflow
from autoparts_admin.accounts.models import MANAGE_USERS, Permissions, Role, UserProfile
from autoparts_admin.accounts.service import AccountService
from autoparts_admin.api.deps import account_service_dep, deletion_workflow_dep
from autoparts_admin.auth.deps import require_capability

router = APIRouter(prefix="/v1/admin/users", tags=["admin-users"])

_manage_users = [Depends(require_capability(MANAGE_USERS))]


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    display_name: str = Field(default="", max_length=256, alias="displayName")
    role: Role = Role.viewer


class RoleUpdateRequest(BaseModel):
    role: Role


class DeleteUserResponse(BaseModel):
    success: bool = True


@router.delete("/{user_id}", response_model=DeleteUserResponse)
async def delete_user(
    user_id: str,
    authorization: str | None = Header(default=None),
    workflow: UserDeletionWorkflow = Depends(deletion_workflow_dep),
) -> DeleteUserResponse:
    # Authentication and authorization happen inside the workflow, after the
    # target check, so every failure maps onto one documented status.
    await workflow.run(authorization=authorization, target_id=user_id)
    return DeleteUserResponse()


@router.delete("/{user_id}/profile", response_model=DeleteUserResponse, dependencies=_manage_users)
async def delete_leftover_profile(
    user_id: str,
    svc: AccountService = Depends(account_service_dep),
) -> DeleteUserResponse:
    await svc.delete_profile(user_id)
    return DeleteUserResponse()


@router.get("", response_model=list[UserProfile], dependencies=_manage_users)
async def list_users(svc: AccountService = Depends(account_service_dep)) -> list[UserProfile]:
    return await svc.list_users()


@router.post("", response_model=UserProfile, status_code=201, dependencies=_manage_users)
async def create_user(
    body: CreateUserRequest,
    svc: AccountService = Depends(account_service_dep),
) -> UserProfile:
    return await svc.provision(email=body.email, display_name=body.display_name, role=body.role)


@router.get("/{user_id}", response_model=UserProfile, dependencies=_manage_users)
async def get_user(
    user_id: str,
    svc: AccountService = Depends(account_service_dep),
) -> UserProfile:
    return await svc.get_user(user_id)


@router.put("/{user_id}/role", response_model=UserProfile, dependencies=_manage_users)
async def update_role(
    user_id: str,
    body: RoleUpdateRequest,
    svc: AccountService = Depends(account_service_dep),
) -> UserProfile:
    # Changing the role resets permissions to that role's defaults.
    return await svc.set_role(user_id, body.role)


@router.put("/{user_id}/permissions", response_model=UserProfile, dependencies=_manage_users)
async def update_permissions(
    user_id: str,
    body: Permissions,
    svc: AccountService = Depends(account_service_dep),
) -> UserProfile:
    return await svc.set_permissions(user_id, body)


@router.post("/{user_id}/activate", response_model=UserProfile, dependencies=_manage_users)
async def activate_user(
    user_id: str,
    svc: AccountService = Depends(account_service_dep),
) -> UserProfile:
    return await svc.set_active(user_id, True)


@router.post("/{user_id}/deactivate", response_model=UserProfile, dependencies=_manage_users)
async def deactivate_user(
    user_id: str,
    svc: AccountService = Depends(account_service_dep),
) -> UserProfile:
    return await svc.set_active(user_id, False)


# --- Module Notes -----------------------------------------------------------
# `DELETE /{user_id}/profile` is the remediation for a `partial_deletion` response;
# it refuses to run while the user still exists in the authentication service.
