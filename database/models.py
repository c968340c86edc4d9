"""
SQLAlchemy ORM models for managed file storage.

Files uploaded to local storage are recorded here; knowledge search hits
that point into the storage folder are resolved back to these rows.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, Index
from sqlalchemy.orm import DeclarativeBase


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class StoredFile(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)  # stored name: <id><ext>
    origin_name = Column(String(255), nullable=False)  # name as uploaded
    path = Column(String(1024), nullable=False)
    size = Column(Integer, default=0)
    ext = Column(String(20), nullable=True)
    type = Column(String(20), default="other")  # image, video, audio, text, document, other
    count = Column(Integer, default=1)  # references held by messages / knowledge bases
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_files_origin_name", "origin_name"),
    )
