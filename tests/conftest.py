from __future__ import annotations

from pathlib import Path

import pytest

from docstore.errors import ProviderError
from docstore.vector_store.json_store import EmbeddingStore
from tests._fixtures.fakes import FakeClock, FakeProvider


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "embeddings.json"


@pytest.fixture
def store(store_path: Path, provider: FakeProvider, clock: FakeClock) -> EmbeddingStore:
    return EmbeddingStore(store_path, provider, clock=clock)


@pytest.fixture
def failing_provider() -> FakeProvider:
    fake = FakeProvider()
    fake.fail_with = ProviderError("backend unreachable")
    return fake
