"""
File record shared between storage and the knowledge layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class FileRecord:
    """A file uploaded to local managed storage."""
    id: str
    name: str
    origin_name: str
    path: str = ""
    size: int = 0
    ext: Optional[str] = None
    type: str = "other"
    count: int = 1
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def from_orm(cls, row: Any) -> "FileRecord":
        return cls(
            id=row.id,
            name=row.name,
            origin_name=row.origin_name,
            path=row.path,
            size=row.size or 0,
            ext=row.ext,
            type=row.type or "other",
            count=row.count if row.count is not None else 1,
            created_at=row.created_at or datetime.utcnow(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "origin_name": self.origin_name,
            "path": self.path,
            "size": self.size,
            "ext": self.ext,
            "type": self.type,
            "count": self.count,
            "created_at": self.created_at.isoformat(),
        }
