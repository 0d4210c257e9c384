"""Tests for the FastAPI service."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from docstore.config import settings
from docstore.errors import ProviderError
from docstore.main import create_app
from docstore.vector_store.base import EmbeddingDocument
from docstore.vector_store.json_store import EmbeddingStore
from tests._fixtures.fakes import FakeProvider, FakeResource

ADMIN = {"X-Admin-Token": "secret"}


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider(vectors={"rings": [1.0, 0.0]}, default=[0.0, 1.0])


@pytest.fixture
def resource() -> FakeResource:
    return FakeResource()


@pytest.fixture
def api_store(tmp_path: Path, provider: FakeProvider, resource: FakeResource) -> EmbeddingStore:
    store = EmbeddingStore(tmp_path / "embeddings.json", provider, resource=resource)
    store.add_document(EmbeddingDocument(id="r", content="about rings", title="Rings", embedding=[1.0, 0.0]))
    store.add_document(EmbeddingDocument(id="o", content="other", embedding=[0.0, 1.0]))
    return store


@pytest.fixture
def client(api_store: EmbeddingStore, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "admin_token", SecretStr("secret"))
    monkeypatch.setattr(settings, "chunk_size_words", 3)
    monkeypatch.setattr(settings, "chunk_overlap_words", 1)
    app = create_app(lambda: api_store)
    with TestClient(app) as test_client:
        yield test_client


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_search_returns_ranked_hits(client: TestClient) -> None:
    response = client.post("/api/v1/search", json={"query": "rings", "top_k": 5, "threshold": 0.5})

    assert response.status_code == 200
    hits = response.json()["results"]
    assert [hit["id"] for hit in hits] == ["r"]
    assert hits[0]["title"] == "Rings"
    assert hits[0]["similarity"] == pytest.approx(1.0)


def test_search_rejects_blank_query(client: TestClient) -> None:
    assert client.post("/api/v1/search", json={"query": "   "}).status_code == 400


def test_search_maps_provider_failure_to_bad_gateway(client: TestClient, provider: FakeProvider) -> None:
    provider.fail_with = ProviderError("backend unreachable")

    response = client.post("/api/v1/search", json={"query": "rings"})

    assert response.status_code == 502
    assert "backend unreachable" in response.json()["detail"]


def test_admin_routes_require_token(client: TestClient) -> None:
    assert client.get("/admin/status").status_code == 403
    assert client.post("/admin/clear", headers={"X-Admin-Token": "wrong"}).status_code == 403


def test_admin_index_adds_chunks_and_saves(client: TestClient, api_store: EmbeddingStore) -> None:
    response = client.post(
        "/admin/documents",
        headers=ADMIN,
        json={"text": "a b c d e", "url": "https://example.com/x", "title": "X", "depth": 1},
    )

    assert response.status_code == 200
    assert response.json() == {"indexed_chunks": 2, "total_documents": 4}
    assert api_store.file_path.exists()

    status = client.get("/admin/status", headers=ADMIN).json()
    assert status["documents"] == 4
    assert status["stale"] is False
    assert status["last_updated"]


def test_admin_clear_empties_store(client: TestClient, api_store: EmbeddingStore) -> None:
    response = client.post("/admin/clear", headers=ADMIN)

    assert response.json() == {"status": "cleared"}
    assert len(api_store) == 0
    assert client.post("/api/v1/search", json={"query": "rings"}).json() == {"results": []}


def test_shutdown_destroys_store(api_store: EmbeddingStore, resource: FakeResource, monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_token", None)
    with TestClient(create_app(lambda: api_store)) as test_client:
        assert test_client.get("/admin/status").status_code == 500

    assert resource.closed == 1
