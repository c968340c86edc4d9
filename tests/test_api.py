"""Tests for the knowledge reference API endpoints."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.services import Services, get_services
from conftest import FakeSearch, make_hit
from knowledge.references import ReferenceAssembler
from knowledge.search import HttpKnowledgeSearch
from knowledge.reranker import Reranker


BASE_PAYLOAD = {
    "id": "kb-1",
    "name": "Docs",
    "model": {"id": "BAAI/bge-m3", "provider": "silicon"},
    "dimensions": 1024,
    "items": [{"id": "item-url", "type": "url", "uniqueId": "loader-url"}],
}


class FailingSearch:
    async def search(self, search, base):
        raise httpx.ConnectError("search service down")


@pytest.fixture
def services(registry, file_lookup):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": [
            {"index": 1, "relevance_score": 0.95},
            {"index": 0, "relevance_score": 0.15},
        ]})

    svc = Services()
    svc.registry = registry
    svc.files = file_lookup
    svc.search = FakeSearch([
        make_hit("from the web", source="https://example.com", loader_id="loader-url"),
        make_hit("from disk", source="/tmp/a.txt"),
    ])
    svc.reranker = Reranker(registry, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    svc.assembler = ReferenceAssembler(registry, svc.search, file_lookup, reranker=svc.reranker)
    svc._initialized = True
    return svc


@pytest.fixture
def api(client, services):
    app.dependency_overrides[get_services] = lambda: services
    yield client
    app.dependency_overrides.clear()


def test_root_endpoint(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "operational"


def test_health_endpoint(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] in ("healthy", "degraded")


def test_params(api):
    resp = api.post("/api/v1/knowledge/params", json=BASE_PAYLOAD)
    assert resp.status_code == 200
    data = resp.json()
    assert data["baseURL"] == "https://api.siliconflow.cn/v1/"
    assert data["chunkSize"] == 500
    assert data["rerankModel"] == "BAAI/bge-reranker-v2-m3"


def test_params_unknown_provider(api):
    payload = {**BASE_PAYLOAD, "model": {"id": "m", "provider": "nowhere"}}
    resp = api.post("/api/v1/knowledge/params", json=payload)
    assert resp.status_code == 400


def test_references(api):
    resp = api.post("/api/v1/knowledge/references", json={
        "base": BASE_PAYLOAD,
        "message": {"content": "where is the doc?"},
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 2
    block = data["references"]
    references = json.loads(block[len("```json\n"):-len("\n```")])
    assert references[0] == {"id": 0, "content": "from the web", "sourceUrl": "https://example.com", "type": "url"}
    assert references[1] == {"id": 1, "content": "from disk", "sourceUrl": "/tmp/a.txt"}


def test_references_search_failure(api, services):
    services.assembler.search_client = FailingSearch()
    resp = api.post("/api/v1/knowledge/references", json={
        "base": BASE_PAYLOAD,
        "message": {"content": "q"},
    })
    assert resp.status_code == 502


def test_references_empty_message(api):
    resp = api.post("/api/v1/knowledge/references", json={"base": BASE_PAYLOAD, "message": {"content": ""}})
    assert resp.status_code == 422


def test_rerank(api):
    payload = {
        **BASE_PAYLOAD,
        "rerankModel": {"id": "BAAI/bge-reranker-v2-m3", "provider": "silicon"},
    }
    resp = api.post("/api/v1/knowledge/rerank", json={
        "base": payload,
        "query": "q",
        "results": [
            {"pageContent": "one", "metadata": {"source": "s1"}},
            {"pageContent": "two", "metadata": {"source": "s2"}},
        ],
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["reranked"] is True
    assert [r["pageContent"] for r in data["results"]] == ["two", "one"]
    assert data["results"][0]["score"] == 0.95


def test_rerank_without_model_is_unchanged(api):
    resp = api.post("/api/v1/knowledge/rerank", json={
        "base": BASE_PAYLOAD,
        "query": "q",
        "results": [{"pageContent": "one", "metadata": {"source": "s1"}}],
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["reranked"] is False
    assert data["results"][0]["pageContent"] == "one"


def test_not_ready(client):
    app.dependency_overrides[get_services] = lambda: Services()
    try:
        resp = client.post("/api/v1/knowledge/params", json=BASE_PAYLOAD)
        assert resp.status_code == 503
    finally:
        app.dependency_overrides.clear()


def test_malformed_search_response(api, services):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    services.assembler.search_client = HttpKnowledgeSearch(
        "http://search.local", client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )
    resp = api.post("/api/v1/knowledge/references", json={
        "base": BASE_PAYLOAD,
        "message": {"content": "q"},
    })
    assert resp.status_code == 502


def test_rerank_keeps_metadata_keys(api):
    payload = {
        **BASE_PAYLOAD,
        "rerankModel": {"id": "BAAI/bge-reranker-v2-m3", "provider": "silicon"},
    }
    resp = api.post("/api/v1/knowledge/rerank", json={
        "base": payload,
        "query": "q",
        "results": [
            {"pageContent": "one", "metadata": {"source": "s1"}},
            {"pageContent": "two", "metadata": {"source": "s2", "uniqueLoaderId": "loader-url"}},
        ],
    })
    results = resp.json()["results"]
    assert results[0]["metadata"] == {"source": "s2", "uniqueLoaderId": "loader-url"}
    assert results[1]["metadata"] == {"source": "s1"}


def test_services_rebuilt_after_restart():
    with TestClient(app):
        pass
    assert get_services().is_ready is False

    with TestClient(app) as client:
        services = get_services()
        assert services.is_ready
        assert not services.http_client.is_closed
        assert services.search.client is services.http_client
        assert client.get("/health").json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_aclose_resets_container():
    svc = Services()
    svc.initialize()
    assert svc.is_ready

    await svc.aclose()

    assert svc.is_ready is False
    assert svc.http_client is None
    assert svc.assembler is None
    svc.initialize()
    assert svc.is_ready
    await svc.aclose()
