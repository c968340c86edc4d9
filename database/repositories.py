"""
Repository classes for the file storage data access layer.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from .models import StoredFile

logger = logging.getLogger(__name__)


class FileRepository:
    """Data access for managed file records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> StoredFile:
        record = StoredFile(**kwargs)
        self.session.add(record)
        await self.session.flush()
        return record

    async def get_by_id(self, file_id: str) -> Optional[StoredFile]:
        result = await self.session.execute(
            select(StoredFile).where(StoredFile.id == file_id)
        )
        return result.scalar_one_or_none()

    async def list_recent(self, limit: int = 50) -> List[StoredFile]:
        result = await self.session.execute(
            select(StoredFile).order_by(StoredFile.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def delete(self, file_id: str) -> bool:
        result = await self.session.execute(
            delete(StoredFile).where(StoredFile.id == file_id)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(StoredFile.id)))
        return result.scalar() or 0
