"""Tests for the bundled embedding providers."""

from __future__ import annotations

from types import SimpleNamespace
from typing import List

import pytest
from openai import OpenAIError

from docstore.config import Settings
from docstore.embeddings import get_embedding_provider
from docstore.embeddings.base import EmbeddingProvider
from docstore.embeddings.client import OpenAIEmbeddingProvider
from docstore.embeddings.local import LocalEmbeddingProvider, LocalModelSession
from docstore.errors import ConfigError, ProviderError


class _FakeEmbeddingsAPI:
    """Answers with one vector per input, reversed to mimic out-of-order responses."""

    def __init__(self) -> None:
        self.requests: List[object] = []
        self.error: Exception | None = None
        self.drop_last = False

    def create(self, *, model: str, input):
        self.requests.append(input)
        if self.error is not None:
            raise self.error
        texts = [input] if isinstance(input, str) else list(input)
        data = [SimpleNamespace(index=i, embedding=[float(len(text)), 0.0]) for i, text in enumerate(texts)]
        if self.drop_last:
            data = data[:-1]
        return SimpleNamespace(data=list(reversed(data)))


def _openai_provider(**kwargs) -> tuple[OpenAIEmbeddingProvider, _FakeEmbeddingsAPI]:
    api = _FakeEmbeddingsAPI()
    provider = OpenAIEmbeddingProvider(model="test-model", client=SimpleNamespace(embeddings=api), **kwargs)
    return provider, api


def test_openai_batch_restores_input_order() -> None:
    provider, _ = _openai_provider(normalize=False)

    vectors = provider.get_embeddings_batch(["a", "bbb", "cc"])

    assert vectors == [[1.0, 0.0], [3.0, 0.0], [2.0, 0.0]]


def test_openai_batch_is_split_by_batch_size() -> None:
    provider, api = _openai_provider(batch_size=2, normalize=False)

    vectors = provider.get_embeddings_batch(["a", "bb", "ccc", "dddd", "eeeee"])

    assert api.requests == [["a", "bb"], ["ccc", "dddd"], ["eeeee"]]
    assert [v[0] for v in vectors] == [1.0, 2.0, 3.0, 4.0, 5.0]


def test_openai_normalizes_by_default() -> None:
    provider, _ = _openai_provider()

    assert provider.get_embedding("abcd") == [1.0, 0.0]


def test_openai_empty_batch_skips_request() -> None:
    provider, api = _openai_provider()

    assert provider.get_embeddings_batch([]) == []
    assert api.requests == []


def test_openai_errors_become_provider_errors() -> None:
    provider, api = _openai_provider()
    api.error = OpenAIError("rate limited")

    with pytest.raises(ProviderError, match="rate limited"):
        provider.get_embedding("hello")


def test_openai_missing_vectors_are_rejected() -> None:
    provider, api = _openai_provider()
    api.drop_last = True

    with pytest.raises(ProviderError):
        provider.get_embeddings_batch(["a", "b"])


def test_openai_empty_vector_is_rejected() -> None:
    api = SimpleNamespace(create=lambda **_: SimpleNamespace(data=[SimpleNamespace(index=0, embedding=[])]))
    provider = OpenAIEmbeddingProvider(client=SimpleNamespace(embeddings=api))

    with pytest.raises(ProviderError, match="empty embedding response"):
        provider.get_embedding("hello")


class _FakeModel:
    def __init__(self) -> None:
        self.calls: List[dict] = []

    def encode(self, texts, **kwargs):
        self.calls.append(kwargs)
        return [[float(len(text)), 1.0] for text in texts]


def test_local_provider_encodes_with_normalization_enabled() -> None:
    model = _FakeModel()
    provider = LocalEmbeddingProvider(LocalModelSession("test-model", model=model))

    assert provider.get_embeddings_batch(["ab", "c"]) == [[2.0, 1.0], [1.0, 1.0]]
    assert provider.get_embedding("xyz") == [3.0, 1.0]
    assert all(call["normalize_embeddings"] for call in model.calls)


def test_local_session_close_is_idempotent_and_disables_provider() -> None:
    with LocalModelSession("test-model", model=_FakeModel()) as session:
        provider = LocalEmbeddingProvider(session)
        assert session.is_open
        provider.get_embedding("warm")

    session.close()

    assert not session.is_open
    with pytest.raises(ProviderError, match="not initialized"):
        provider.get_embedding("cold")


def test_local_model_failures_become_provider_errors() -> None:
    class _Broken:
        def encode(self, texts, **kwargs):
            raise RuntimeError("onnx session crashed")

    provider = LocalEmbeddingProvider(LocalModelSession("test-model", model=_Broken()))

    with pytest.raises(ProviderError, match="onnx session crashed"):
        provider.get_embedding("text")


def test_bundled_providers_satisfy_the_capability() -> None:
    local = LocalEmbeddingProvider(LocalModelSession("test-model", model=_FakeModel()))
    remote, _ = _openai_provider()

    assert isinstance(local, EmbeddingProvider)
    assert isinstance(remote, EmbeddingProvider)


def test_factory_rejects_unknown_backend() -> None:
    with pytest.raises(ConfigError, match="Unsupported embedding provider"):
        get_embedding_provider(Settings(EMBEDDING_PROVIDER="word2vec"))


def test_factory_builds_client_from_given_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-global")
    config = Settings(
        EMBEDDING_PROVIDER="openai",
        OPENAI_API_KEY="sk-from-config",
        OPENAI_BASE_URL="http://config.example/v1",
        OPENAI_TIMEOUT_SEC=12.5,
        OPENAI_MAX_RETRIES=4,
    )

    provider, resource = get_embedding_provider(config)

    assert resource is None
    assert provider.client.api_key == "sk-from-config"
    assert str(provider.client.base_url).rstrip("/") == "http://config.example/v1"
    assert provider.client.timeout == 12.5
    assert provider.client.max_retries == 4
