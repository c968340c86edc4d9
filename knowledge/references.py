"""
Reference assembly for chat messages.

Runs a knowledge search for a message, resolves where each hit came from
and renders the retained hits as a JSON reference block for the model.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from files.lookup import FileLookup
from providers.registry import ProviderRegistry
from .models import KnowledgeBase, Message, Reference, ResolvedHit, SearchHit
from .params import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_RERANK_MODEL,
    PLACEHOLDER_API_KEY,
    build_search_params,
)
from .reranker import Reranker
from .search import KnowledgeSearch
from .sources import (
    DEFAULT_FILE_LINK_HOST,
    DEFAULT_STORAGE_ANCHOR,
    get_file_from_url,
    get_knowledge_source_url,
)

logger = logging.getLogger(__name__)

# Hard cap on references per search
MAX_REFERENCES = 6


@dataclass
class ReferenceConfig:
    """Configuration for reference assembly."""
    max_references: int = MAX_REFERENCES
    storage_anchor: str = DEFAULT_STORAGE_ANCHOR
    file_link_host: str = DEFAULT_FILE_LINK_HOST
    default_chunk_size: int = DEFAULT_CHUNK_SIZE
    default_chunk_overlap: int = DEFAULT_CHUNK_OVERLAP
    default_rerank_model: str = DEFAULT_RERANK_MODEL
    placeholder_api_key: str = PLACEHOLDER_API_KEY

    def __post_init__(self):
        if not 1 <= self.max_references <= MAX_REFERENCES:
            raise ValueError(
                f"max_references must be between 1 and {MAX_REFERENCES}, got {self.max_references}"
            )

    @classmethod
    def from_settings(cls, settings: Any) -> "ReferenceConfig":
        return cls(
            max_references=settings.max_references,
            storage_anchor=settings.storage_anchor,
            file_link_host=settings.file_link_host,
            default_chunk_size=settings.default_chunk_size,
            default_chunk_overlap=settings.default_chunk_overlap,
            default_rerank_model=settings.default_rerank_model,
            placeholder_api_key=settings.placeholder_api_key,
        )


def format_references(references: List[Reference]) -> str:
    """Render references as a fenced ``json`` block, two-space indented."""
    body = json.dumps([r.to_dict() for r in references], indent=2, ensure_ascii=False)
    return f"```json\n{body}\n```"


class ReferenceAssembler:
    """
    Builds the knowledge reference block for a chat message.

    Pipeline:
    1. Build search params from the knowledge base
    2. Search (and optionally rerank)
    3. Resolve every hit's source concurrently
    4. Keep the first ``max_references`` hits and number them from 0
    5. Serialize as a fenced JSON block
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        search: KnowledgeSearch,
        files: FileLookup,
        reranker: Optional[Reranker] = None,
        config: Optional[ReferenceConfig] = None,
    ):
        """
        Initialize the assembler.

        Args:
            registry: Provider registry for search parameter construction
            search: Search service client
            files: File lookup for hits from local storage
            reranker: Optional reranker applied when the base has a rerank model
            config: Assembly configuration
        """
        self.registry = registry
        self.search_client = search
        self.files = files
        self.reranker = reranker
        self.config = config or ReferenceConfig()

    async def search(self, base: KnowledgeBase, message: Message) -> List[SearchHit]:
        """Run the search for a message; configuration errors propagate."""
        params = build_search_params(
            base,
            self.registry,
            default_chunk_size=self.config.default_chunk_size,
            default_chunk_overlap=self.config.default_chunk_overlap,
            default_rerank_model=self.config.default_rerank_model,
            placeholder_api_key=self.config.placeholder_api_key,
        )
        hits = await self.search_client.search(message.content, params)

        if self.reranker and base.rerank_model and hits:
            hits = await self.reranker.get_rerank_result(base, message.content, hits)

        return hits

    async def resolve(self, hits: List[SearchHit]) -> List[ResolvedHit]:
        """Resolve the source file of every hit; gather keeps the input order."""
        files = await asyncio.gather(*[
            get_file_from_url(hit.metadata.source, self.files, self.config.storage_anchor)
            for hit in hits
        ])
        return [ResolvedHit(hit=hit, file=file) for hit, file in zip(hits, files)]

    def build_references(self, base: KnowledgeBase, resolved: List[ResolvedHit]) -> List[Reference]:
        """Truncate to the reference limit and number the retained hits."""
        retained = resolved[:self.config.max_references]
        if len(resolved) > len(retained):
            logger.debug(f"Truncated {len(resolved)} hits -> {len(retained)} references")

        references = []
        for index, item in enumerate(retained):
            base_item = base.find_item(item.unique_loader_id)
            references.append(Reference(
                id=index,
                content=item.hit.page_content,
                source_url=get_knowledge_source_url(item, self.config.file_link_host),
                type=base_item.type if base_item else None,
            ))
        return references

    async def get_references(self, base: KnowledgeBase, message: Message) -> List[Reference]:
        hits = await self.search(base, message)
        resolved = await self.resolve(hits)
        return self.build_references(base, resolved)

    async def get_knowledge_references(self, base: KnowledgeBase, message: Message) -> str:
        """
        Build the reference block for a message.

        Args:
            base: Knowledge base to search
            message: Chat message whose content is the query

        Returns:
            A fenced ``json`` block listing the references

        Raises:
            ProviderNotFoundError: if the base's embedding provider is unknown
        """
        references = await self.get_references(base, message)
        logger.info(f"Built {len(references)} references for base {base.id}")
        return format_references(references)
