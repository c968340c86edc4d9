"""
Data model for knowledge search and reference assembly.

Wire formats use the camelCase keys of the search service
(``pageContent``, ``uniqueLoaderId``, ``sourceUrl``); the Python side
uses snake_case attributes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from files.models import FileRecord
from providers.models import ModelRef


@dataclass(frozen=True)
class KnowledgeItem:
    """An indexed item of a knowledge base (file, url, note, sitemap, directory)."""
    id: str
    type: str
    unique_id: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KnowledgeItem":
        return cls(
            id=data["id"],
            type=data["type"],
            unique_id=data.get("uniqueId", data.get("unique_id")),
            content=data.get("content"),
        )


@dataclass(frozen=True)
class KnowledgeBase:
    """Knowledge base configuration. Owned by the caller, never mutated here."""
    id: str
    model: ModelRef
    dimensions: int
    name: str = ""
    items: List[KnowledgeItem] = field(default_factory=list)
    rerank_model: Optional[ModelRef] = None
    chunk_size: Optional[int] = None
    chunk_overlap: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KnowledgeBase":
        rerank = data.get("rerankModel", data.get("rerank_model"))
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            model=ModelRef.from_dict(data["model"]),
            dimensions=data["dimensions"],
            items=[KnowledgeItem.from_dict(i) for i in data.get("items", [])],
            rerank_model=ModelRef.from_dict(rerank) if rerank else None,
            chunk_size=data.get("chunkSize", data.get("chunk_size")),
            chunk_overlap=data.get("chunkOverlap", data.get("chunk_overlap")),
        )

    def find_item(self, unique_id: Optional[str]) -> Optional[KnowledgeItem]:
        """Find the item that produced a hit, by loader id."""
        if unique_id is None:
            return None
        for item in self.items:
            if item.unique_id == unique_id:
                return item
        return None


@dataclass(frozen=True)
class SearchParams:
    """Connection and chunking parameters sent with a search request."""
    id: str
    model: str
    dimensions: int
    api_key: str
    api_version: Optional[str]
    base_url: str
    chunk_size: int
    chunk_overlap: int
    rerank_model: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "model": self.model,
            "dimensions": self.dimensions,
            "apiKey": self.api_key,
            "apiVersion": self.api_version,
            "baseURL": self.base_url,
            "chunkSize": self.chunk_size,
            "chunkOverlap": self.chunk_overlap,
            "rerankModel": self.rerank_model,
        }


@dataclass(frozen=True)
class HitMetadata:
    """Metadata of a search hit; unknown keys are kept in ``extra``."""
    source: str = ""
    unique_loader_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "HitMetadata":
        data = dict(data or {})
        source = data.pop("source", None)
        return cls(
            source=source if isinstance(source, str) else "",
            unique_loader_id=data.pop("uniqueLoaderId", None),
            extra=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {**self.extra, "source": self.source}
        if self.unique_loader_id is not None:
            result["uniqueLoaderId"] = self.unique_loader_id
        return result


@dataclass(frozen=True)
class SearchHit:
    """A chunk returned by the search service."""
    page_content: str
    metadata: HitMetadata = field(default_factory=HitMetadata)
    score: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchHit":
        return cls(
            page_content=data.get("pageContent") or "",
            metadata=HitMetadata.from_dict(data.get("metadata")),
            score=data.get("score"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"pageContent": self.page_content, "metadata": self.metadata.to_dict()}
        if self.score is not None:
            result["score"] = self.score
        return result


@dataclass(frozen=True)
class ResolvedHit:
    """A search hit plus the local file it came from, if any."""
    hit: SearchHit
    file: Optional[FileRecord] = None

    @property
    def source(self) -> str:
        return self.hit.metadata.source

    @property
    def unique_loader_id(self) -> Optional[str]:
        return self.hit.metadata.unique_loader_id


@dataclass(frozen=True)
class Reference:
    """A numbered, source-resolved chunk presented alongside a chat turn."""
    id: int
    content: str
    source_url: str
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "sourceUrl": self.source_url,
        }
        # Unmatched items carry no type key at all
        if self.type is not None:
            result["type"] = self.type
        return result


@dataclass(frozen=True)
class Message:
    """The chat message a search is run for."""
    content: str
    id: Optional[str] = None
    role: str = "user"


@dataclass
class RerankOutcome:
    """Result of a rerank pass; ``reason`` says why results were left unchanged."""
    results: List[SearchHit]
    reranked: bool
    reason: Optional[str] = None
