"""
autoparts_admin.db.repositories.identities

Repository for `Identity` entities.

Responsibilities:
- Create, fetch, and delete directory identities.
- Stamp credential revocation times and toggle the disabled flag.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from autoparts_admin.db.models import Identity


class IdentityRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, uid: str, email: str, display_name: str) -> Identity:
        identity = Identity(uid=uid, email=email, display_name=display_name, disabled=False)
        self._session.add(identity)
        await self._session.flush()
        return identity

    async def get(self, uid: str) -> Identity | None:
        return await self._session.get(Identity, uid)

    async def get_by_email(self, email: str) -> Identity | None:
        stmt = select(Identity).where(Identity.email == email)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def delete(self, uid: str) -> bool:
        identity = await self._session.get(Identity, uid, with_for_update=True)
        if identity is None:
            return False
        await self._session.delete(identity)
        await self._session.flush()
        return True

    async def set_tokens_valid_after(self, uid: str, instant: datetime) -> bool:
        identity = await self._session.get(Identity, uid, with_for_update=True)
        if identity is None:
            return False
        identity.tokens_valid_after = instant
        return True

    async def set_disabled(self, uid: str, disabled: bool) -> bool:
        identity = await self._session.get(Identity, uid, with_for_update=True)
        if identity is None:
            return False
        identity.disabled = disabled
        return True
