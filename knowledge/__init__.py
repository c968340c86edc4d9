"""
Knowledge reference module.

This module provides:
- Search parameter construction per provider
- Source resolution for hits from local file storage
- Reference assembly into a JSON block
- Reranking with graceful fallback
"""

from .models import (
    KnowledgeBase,
    KnowledgeItem,
    SearchParams,
    SearchHit,
    HitMetadata,
    ResolvedHit,
    Reference,
    Message,
    RerankOutcome,
)
from .params import build_search_params
from .sources import extract_file_id, get_file_from_url, get_knowledge_source_url
from .references import ReferenceAssembler, ReferenceConfig, format_references
from .reranker import Reranker
from .search import KnowledgeSearch, HttpKnowledgeSearch

__all__ = [
    "KnowledgeBase",
    "KnowledgeItem",
    "SearchParams",
    "SearchHit",
    "HitMetadata",
    "ResolvedHit",
    "Reference",
    "Message",
    "RerankOutcome",
    "build_search_params",
    "extract_file_id",
    "get_file_from_url",
    "get_knowledge_source_url",
    "ReferenceAssembler",
    "ReferenceConfig",
    "format_references",
    "Reranker",
    "KnowledgeSearch",
    "HttpKnowledgeSearch",
]
