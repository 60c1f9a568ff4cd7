from __future__ import annotations

from fastapi import APIRouter, Depends

from autoparts_admin.accounts.models import UserProfile
from autoparts_admin.auth.deps import get_caller_profile

router = APIRouter(prefix="/v1/account", tags=["account"])


@router.get("", response_model=UserProfile)
async def get_own_profile(profile: UserProfile = Depends(get_caller_profile)) -> UserProfile:
    return profile
