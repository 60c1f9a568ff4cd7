from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from autoparts_admin.db.models import Document


class DocumentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, collection: str, doc_id: str) -> Document | None:
        return await self._session.get(Document, (collection, doc_id))

    async def upsert(self, collection: str, doc_id: str, data: dict[str, Any]) -> Document:
        existing = await self._session.get(Document, (collection, doc_id), with_for_update=True)
        if existing is not None:
            existing.data = data
            await self._session.flush()
            return existing

        doc = Document(collection=collection, doc_id=doc_id, data=data)
        self._session.add(doc)
        await self._session.flush()
        return doc

    async def delete(self, collection: str, doc_id: str) -> int:
        # Bulk delete by key: zero matched rows is not an error.
        stmt = delete(Document).where(Document.collection == collection, Document.doc_id == doc_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def list_for_collection(self, collection: str) -> list[Document]:
        stmt = select(Document).where(Document.collection == collection).order_by(Document.doc_id)
        return list((await self._session.execute(stmt)).scalars().all())
