"""
Service initialization and dependency injection for the knowledge reference API.

Creates and manages all service instances used by the API.
"""

import logging
from typing import Optional

import httpx

from config.settings import get_settings, Settings
from database.session import get_session_factory
from files.lookup import DatabaseFileLookup, FileLookup, InMemoryFileLookup
from knowledge.references import ReferenceAssembler, ReferenceConfig
from knowledge.reranker import Reranker
from knowledge.search import HttpKnowledgeSearch, KnowledgeSearch
from providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.registry: Optional[ProviderRegistry] = None
        self.http_client: Optional[httpx.AsyncClient] = None
        self.files: Optional[FileLookup] = None
        self.search: Optional[KnowledgeSearch] = None
        self.reranker: Optional[Reranker] = None
        self.assembler: Optional[ReferenceAssembler] = None
        self._initialized = False

    def initialize(self, settings: Optional[Settings] = None):
        """Initialize all services."""
        if self._initialized:
            return

        self.settings = settings or get_settings()
        logger.info("Initializing knowledge reference services")

        try:
            self._init_registry()
            self._init_http_client()
            self._init_files()
            self._init_search()
            self._init_reranker()
            self._init_assembler()
            self._initialized = True
            logger.info("All services initialized successfully")
        except Exception as e:
            logger.error(f"Service initialization failed: {e}")
            # Allow API to start even if some services fail
            self._initialized = True
            logger.warning("API starting in degraded mode")

    def _init_registry(self):
        """Load configured providers."""
        path = self.settings.providers_file
        if path:
            self.registry = ProviderRegistry.from_file(path)
        else:
            logger.warning("PROVIDERS_FILE not set, no providers configured")
            self.registry = ProviderRegistry()

    def _init_http_client(self):
        """Shared HTTP client for search and rerank calls."""
        self.http_client = httpx.AsyncClient()

    def _init_files(self):
        """Use the database for file lookups when configured."""
        if self.settings.uses_database:
            try:
                self.files = DatabaseFileLookup(get_session_factory())
                logger.info("File lookup ready: database")
                return
            except RuntimeError as e:
                logger.warning(f"Database unavailable for file lookup: {e}")
        self.files = InMemoryFileLookup()
        logger.info("File lookup ready: in-memory")

    def _init_search(self):
        """Initialize the search service client."""
        self.search = HttpKnowledgeSearch(
            base_url=self.settings.search_service_url,
            client=self.http_client,
        )

    def _init_reranker(self):
        """Initialize reranker."""
        self.reranker = Reranker(
            registry=self.registry,
            client=self.http_client,
            timeout=self.settings.rerank_timeout,
        )

    def _init_assembler(self):
        """Initialize the reference assembler."""
        self.assembler = ReferenceAssembler(
            registry=self.registry,
            search=self.search,
            files=self.files,
            reranker=self.reranker,
            config=ReferenceConfig.from_settings(self.settings),
        )
        logger.info("Reference assembler ready")

    async def aclose(self):
        """Release the shared HTTP client; the next initialize() rebuilds everything."""
        if self.http_client is not None:
            await self.http_client.aclose()
        self.http_client = None
        self.search = None
        self.reranker = None
        self.assembler = None
        self.files = None
        self.registry = None
        self._initialized = False

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.assembler is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "providers": len(self.registry) if self.registry is not None else 0,
            "files": type(self.files).__name__ if self.files is not None else None,
            "search": self.search is not None,
            "reranker": self.reranker is not None,
            "assembler": self.assembler is not None,
        }


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance."""
    return _services


def initialize_services(settings: Optional[Settings] = None):
    """Initialize all services (called at startup)."""
    _services.initialize(settings)
