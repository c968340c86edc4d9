"""
Knowledge search client.

The search service owns embedding, chunking and the vector store; this
module only sends it the query and the search parameters.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from .models import SearchHit, SearchParams

logger = logging.getLogger(__name__)


class KnowledgeSearch(Protocol):
    """Anything that can run a similarity search over a knowledge base."""

    async def search(self, search: str, base: SearchParams) -> List[SearchHit]:
        ...


class HttpKnowledgeSearch:
    """Search service reached over HTTP at ``{base_url}/search``."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/search"
        if self.client is not None:
            return await self.client.post(url, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient() as client:
            return await client.post(url, json=payload, timeout=self.timeout)

    async def search(self, search: str, base: SearchParams) -> List[SearchHit]:
        """
        Search a knowledge base.

        Raises:
            httpx.HTTPError: on transport failure or a non-2xx response
        """
        response = await self._post({"search": search, "base": base.to_dict()})
        response.raise_for_status()

        data = response.json()
        if isinstance(data, dict):
            data = data.get("results", [])

        hits = [SearchHit.from_dict(item) for item in data]
        logger.debug(f"Search on base {base.id} returned {len(hits)} hits")
        return hits
