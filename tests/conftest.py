"""Shared fixtures for knowledge reference tests."""

import os
from typing import List

import pytest
from fastapi.testclient import TestClient

# Keep tests independent of any local .env
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.pop("PROVIDERS_FILE", None)
os.environ.pop("DATABASE_URL", None)

from files.lookup import InMemoryFileLookup
from files.models import FileRecord
from knowledge.models import (
    HitMetadata,
    KnowledgeBase,
    KnowledgeItem,
    SearchHit,
    SearchParams,
)
from providers.models import ModelRef, Provider, ProviderType
from providers.registry import ProviderRegistry


STORAGE_DIR = "/home/user/.config/CherryStudio/Data/Files"


class FakeSearch:
    """Search collaborator returning canned hits and recording calls."""

    def __init__(self, hits: List[SearchHit]):
        self.hits = hits
        self.calls = []

    async def search(self, search: str, base: SearchParams) -> List[SearchHit]:
        self.calls.append((search, base))
        return list(self.hits)


class CountingFileLookup(InMemoryFileLookup):
    """In-memory lookup that records requested ids."""

    def __init__(self, files=None):
        super().__init__(files)
        self.requested = []

    async def get_file(self, file_id):
        self.requested.append(file_id)
        return await super().get_file(file_id)


def make_hit(content: str, source: str = "", loader_id=None, score=None) -> SearchHit:
    return SearchHit(
        page_content=content,
        metadata=HitMetadata(source=source, unique_loader_id=loader_id),
        score=score,
    )


@pytest.fixture
def embed_model():
    return ModelRef(id="BAAI/bge-m3", provider="silicon", name="bge-m3")


@pytest.fixture
def rerank_model():
    return ModelRef(id="BAAI/bge-reranker-v2-m3", provider="silicon")


@pytest.fixture
def registry():
    return ProviderRegistry([
        Provider(
            id="silicon",
            type=ProviderType.OPENAI,
            api_host="https://api.siliconflow.cn",
            api_key="sk-silicon",
        ),
        Provider(
            id="gemini",
            type=ProviderType.GEMINI,
            api_host="https://generativelanguage.googleapis.com",
            api_key="gm-key",
        ),
        Provider(
            id="ollama",
            type=ProviderType.OPENAI,
            api_host="http://localhost:11434",
            api_key="",
        ),
    ])


@pytest.fixture
def knowledge_base(embed_model):
    return KnowledgeBase(
        id="kb-1",
        name="Docs",
        model=embed_model,
        dimensions=1024,
        items=[
            KnowledgeItem(id="item-file", type="file", unique_id="loader-file"),
            KnowledgeItem(id="item-url", type="url", unique_id="loader-url"),
            KnowledgeItem(id="item-note", type="note", unique_id="loader-note"),
        ],
    )


@pytest.fixture
def stored_file():
    return FileRecord(
        id="f3a9c2",
        name="f3a9c2.pdf",
        origin_name="Quarterly Report.pdf",
        path=f"{STORAGE_DIR}/f3a9c2.pdf",
        size=2048,
        ext=".pdf",
        type="document",
    )


@pytest.fixture
def file_lookup(stored_file):
    return CountingFileLookup([stored_file])


@pytest.fixture
def client():
    """Create a FastAPI test client."""
    from api.main import app
    return TestClient(app)
