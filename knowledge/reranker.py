"""
Reranker for knowledge search results.

Sends retrieved chunks to the rerank model's provider and reorders them by
the returned relevance scores. Reranking is best-effort: any failure
leaves the original results in their original order.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

import httpx

from providers.client import ProviderClient
from providers.registry import ProviderRegistry
from .models import KnowledgeBase, RerankOutcome, SearchHit

logger = logging.getLogger(__name__)


class Reranker:
    """
    Reranks search hits through a provider's ``/v1/rerank`` endpoint.

    The endpoint follows the Jina/Cohere/SiliconFlow shape: the request
    carries the query and the documents, the response lists
    ``{index, relevance_score}`` entries in the new order.
    """

    RERANK_PATH = "/v1/rerank"

    def __init__(
        self,
        registry: ProviderRegistry,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the reranker.

        Args:
            registry: Provider registry used to resolve the rerank model
            client: Shared HTTP client; a short-lived one is used per call if None
            timeout: Request timeout in seconds; None keeps httpx defaults
        """
        self.registry = registry
        self.client = client
        self.timeout = timeout

    def _build_payload(self, base: KnowledgeBase, search: str, documents: List[str]) -> Dict[str, Any]:
        payload = {
            "model": base.rerank_model.id if base.rerank_model else None,
            "query": search,
            "documents": documents,
            "top_n": len(documents),
            "return_documents": False,
            "max_chunks_per_doc": base.chunk_size,
            "overlap_tokens": base.chunk_overlap,
        }
        return {k: v for k, v in payload.items() if v is not None}

    async def _post(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> httpx.Response:
        kwargs: Dict[str, Any] = {"json": payload, "headers": headers}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        if self.client is not None:
            return await self.client.post(url, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.post(url, **kwargs)

    @staticmethod
    def _apply_scores(search_results: List[SearchHit], results: List[Dict[str, Any]]) -> List[SearchHit]:
        reranked = []
        for result in results:
            index = result["index"]
            if not isinstance(index, int) or not 0 <= index < len(search_results):
                raise IndexError(f"Rerank index out of range: {index}")
            reranked.append(replace(search_results[index], score=float(result["relevance_score"])))
        return reranked

    async def rerank(self, base: KnowledgeBase, search: str, search_results: List[SearchHit]) -> RerankOutcome:
        """
        Rerank search results against a query.

        Args:
            base: Knowledge base whose rerank model and chunk settings are used
            search: Query text
            search_results: Hits in search order

        Returns:
            RerankOutcome; ``reranked`` is False when the input came back unchanged
        """
        if not search_results:
            return RerankOutcome(results=search_results, reranked=False, reason="no results")

        try:
            documents = [hit.page_content for hit in search_results]
            provider = self.registry.get_provider_by_model(base.rerank_model)
            api_key = ProviderClient(provider).get_api_key() or ""

            url = f"{provider.api_host.rstrip('/')}{self.RERANK_PATH}"
            headers = {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            }
            response = await self._post(url, self._build_payload(base, search, documents), headers)

            if not response.is_success:
                logger.error(f"Rerank API error: {response.text}")
                return RerankOutcome(
                    results=search_results,
                    reranked=False,
                    reason=f"HTTP {response.status_code}",
                )

            reranked = self._apply_scores(search_results, response.json()["results"])

        except Exception as e:
            logger.error(f"Error during reranking: {e}")
            return RerankOutcome(results=search_results, reranked=False, reason=str(e))

        if not reranked:
            logger.warning("Rerank service returned no results, keeping search order")
            return RerankOutcome(results=search_results, reranked=False, reason="empty rerank response")

        logger.debug(f"Reranked {len(search_results)} hits -> {len(reranked)}")
        return RerankOutcome(results=reranked, reranked=True)

    async def get_rerank_result(
        self,
        base: KnowledgeBase,
        search: str,
        search_results: List[SearchHit],
    ) -> List[SearchHit]:
        """Rerank and return the hit list only; never raises."""
        outcome = await self.rerank(base, search, search_results)
        return outcome.results
