"""
Search parameter construction.

Turns a knowledge base configuration into the connection parameters the
search service needs to embed queries and rerank hits.
"""

import logging

from providers.client import ProviderClient
from providers.models import ProviderType
from providers.registry import ProviderRegistry
from .models import KnowledgeBase, SearchParams

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 500
DEFAULT_CHUNK_OVERLAP = 50
DEFAULT_RERANK_MODEL = "BAAI/bge-reranker-v2-m3"
PLACEHOLDER_API_KEY = "secret"

# Gemini exposes its OpenAI-compatible surface under this path
GEMINI_OPENAI_PATH = "/v1beta/openai/"


def build_search_params(
    base: KnowledgeBase,
    registry: ProviderRegistry,
    default_chunk_size: int = DEFAULT_CHUNK_SIZE,
    default_chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    default_rerank_model: str = DEFAULT_RERANK_MODEL,
    placeholder_api_key: str = PLACEHOLDER_API_KEY,
) -> SearchParams:
    """
    Build search parameters for a knowledge base.

    Args:
        base: Knowledge base configuration
        registry: Provider registry used to resolve the embedding model
        default_chunk_size: Used when the base sets no chunk size
        default_chunk_overlap: Used when the base sets no chunk overlap
        default_rerank_model: Used when the base has no rerank model
        placeholder_api_key: Used when the provider has no API key

    Returns:
        SearchParams for the search service

    Raises:
        ProviderNotFoundError: if the embedding model's provider is unknown
    """
    provider = registry.get_provider_by_model(base.model)
    client = ProviderClient(provider)

    host = client.get_base_url()
    if provider.type == ProviderType.GEMINI:
        host = host + GEMINI_OPENAI_PATH
    logger.debug(f"Search params for base {base.id}: provider={provider.id} baseURL={host}")

    return SearchParams(
        id=base.id,
        model=base.model.id,
        dimensions=base.dimensions,
        api_key=client.get_api_key() or placeholder_api_key,
        api_version=provider.api_version,
        base_url=host,
        chunk_size=base.chunk_size or default_chunk_size,
        chunk_overlap=base.chunk_overlap or default_chunk_overlap,
        rerank_model=base.rerank_model.id if base.rerank_model else default_rerank_model,
    )
