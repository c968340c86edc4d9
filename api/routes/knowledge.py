"""
Knowledge reference routes.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from knowledge.models import KnowledgeBase, Message, SearchHit
from knowledge.params import build_search_params
from knowledge.references import format_references
from providers.registry import ProviderNotFoundError
from ..services import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/knowledge")


# ── Request / Response Models ─────────────────────────────────────

class ModelPayload(BaseModel):
    id: str
    provider: str
    name: Optional[str] = None
    group: Optional[str] = None


class KnowledgeItemPayload(BaseModel):
    id: str
    type: str
    uniqueId: Optional[str] = None
    content: Optional[str] = None


class KnowledgeBasePayload(BaseModel):
    id: str
    name: str = ""
    model: ModelPayload
    dimensions: int
    items: List[KnowledgeItemPayload] = []
    rerankModel: Optional[ModelPayload] = None
    chunkSize: Optional[int] = Field(default=None, ge=1)
    chunkOverlap: Optional[int] = Field(default=None, ge=0)

    def to_base(self) -> KnowledgeBase:
        return KnowledgeBase.from_dict(self.model_dump())


class MessagePayload(BaseModel):
    content: str = Field(..., min_length=1)
    id: Optional[str] = None
    role: str = "user"


class ReferencesRequest(BaseModel):
    base: KnowledgeBasePayload
    message: MessagePayload


class ReferencesResponse(BaseModel):
    references: str
    count: int


class RerankRequest(BaseModel):
    base: KnowledgeBasePayload
    query: str
    results: List[Dict[str, Any]] = []


class RerankResponse(BaseModel):
    results: List[Dict[str, Any]]
    reranked: bool
    reason: Optional[str] = None


def _require_ready(services: Services) -> None:
    if not services.is_ready:
        raise HTTPException(status_code=503, detail="Knowledge services not available")


# ── Endpoints ─────────────────────────────────────────────────────

@router.post("/params")
async def search_params(base: KnowledgeBasePayload, services: Services = Depends(get_services)):
    """Show the search parameters derived for a knowledge base."""
    _require_ready(services)
    config = services.assembler.config
    try:
        params = build_search_params(
            base.to_base(),
            services.registry,
            default_chunk_size=config.default_chunk_size,
            default_chunk_overlap=config.default_chunk_overlap,
            default_rerank_model=config.default_rerank_model,
            placeholder_api_key=config.placeholder_api_key,
        )
    except ProviderNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return params.to_dict()


@router.post("/references", response_model=ReferencesResponse)
async def knowledge_references(request: ReferencesRequest, services: Services = Depends(get_services)):
    """Search a knowledge base for a message and return the reference block."""
    _require_ready(services)
    message = Message(
        content=request.message.content,
        id=request.message.id,
        role=request.message.role,
    )
    try:
        references = await services.assembler.get_references(request.base.to_base(), message)
    except ProviderNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except httpx.HTTPError as e:
        logger.error(f"Knowledge search failed: {e}")
        raise HTTPException(status_code=502, detail="Knowledge search failed")
    except (ValueError, TypeError, AttributeError, KeyError) as e:
        logger.error(f"Knowledge search returned malformed data: {e}")
        raise HTTPException(status_code=502, detail="Knowledge search returned malformed data")

    return ReferencesResponse(references=format_references(references), count=len(references))


@router.post("/rerank", response_model=RerankResponse)
async def rerank(request: RerankRequest, services: Services = Depends(get_services)):
    """Rerank search hits; falls back to the given order on any failure."""
    _require_ready(services)
    hits = [SearchHit.from_dict(r) for r in request.results]
    outcome = await services.reranker.rerank(request.base.to_base(), request.query, hits)
    return RerankResponse(
        results=[h.to_dict() for h in outcome.results],
        reranked=outcome.reranked,
        reason=outcome.reason,
    )
