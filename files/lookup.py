"""
File lookup backends.
"""

import logging
from typing import Dict, Iterable, Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.repositories import FileRepository
from .models import FileRecord

logger = logging.getLogger(__name__)


class FileLookup(Protocol):
    """Anything that can resolve a file id to a record."""

    async def get_file(self, file_id: str) -> Optional[FileRecord]:
        ...


class InMemoryFileLookup:
    """Dictionary-backed lookup, used when no database is configured."""

    def __init__(self, files: Optional[Iterable[FileRecord]] = None):
        self._files: Dict[str, FileRecord] = {}
        for record in files or []:
            self.add(record)

    def add(self, record: FileRecord) -> None:
        self._files[record.id] = record

    async def get_file(self, file_id: str) -> Optional[FileRecord]:
        return self._files.get(file_id)

    def __len__(self) -> int:
        return len(self._files)


class DatabaseFileLookup:
    """Lookup backed by the ``files`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_file(self, file_id: str) -> Optional[FileRecord]:
        async with self.session_factory() as session:
            row = await FileRepository(session).get_by_id(file_id)
            if row is None:
                logger.debug(f"File not found in storage: {file_id}")
                return None
            return FileRecord.from_orm(row)
