"""
OpenAI embeddings provider.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from openai import OpenAI, OpenAIError

from docstore.config import settings
from docstore.errors import ConfigError, ProviderError
from docstore.vector_store.similarity import normalize_embedding

DEFAULT_EMBEDDING_MODEL = settings.embedding_model_name
DEFAULT_EMBED_BATCH_SIZE = settings.embed_batch_size

logger = logging.getLogger(__name__)


class OpenAIEmbeddingProvider:
    def __init__(
        self,
        model: str = DEFAULT_EMBEDDING_MODEL,
        batch_size: int = DEFAULT_EMBED_BATCH_SIZE,
        client: OpenAI | None = None,
        normalize: bool = True,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        self.model = model
        self.batch_size = max(1, batch_size)
        self.normalize = normalize
        if client is None:
            if api_key is None and settings.openai_api_key:
                api_key = settings.openai_api_key.get_secret_value()
            try:
                client = OpenAI(
                    api_key=api_key,
                    base_url=base_url if base_url is not None else settings.openai_base_url,
                    timeout=timeout if timeout is not None else settings.openai_timeout_sec,
                    max_retries=max_retries if max_retries is not None else settings.openai_max_retries,
                )
            except OpenAIError as exc:
                raise ConfigError(f"OpenAI client could not be configured: {exc}") from exc
        self.client = client

    def get_embedding(self, text: str) -> List[float]:
        data = self._create(text)
        if not data or not data[0].embedding:
            raise ProviderError("empty embedding response")
        return self._finish(data[0].embedding)

    def get_embeddings_batch(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []

        embeddings: List[List[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = list(texts[start : start + self.batch_size])
            data = self._create(batch)
            if not data:
                raise ProviderError("empty embedding response")

            # The API reports each vector's input position; it is not required to answer in order.
            ordered: List[List[float] | None] = [None] * len(batch)
            for item in data:
                index = item.index
                if index is None or not 0 <= index < len(batch):
                    raise ProviderError(f"embedding response index out of range: {index}")
                ordered[index] = item.embedding

            missing = [start + i for i, vector in enumerate(ordered) if not vector]
            if missing:
                raise ProviderError(f"embedding response missing vectors for inputs {missing}")
            embeddings.extend(self._finish(vector) for vector in ordered)

            logger.debug("Embedded batch", extra={"count": len(batch), "offset": start, "model": self.model})
        return embeddings

    def _create(self, payload: str | List[str]):
        try:
            response = self.client.embeddings.create(model=self.model, input=payload)
        except OpenAIError as exc:
            raise ProviderError(f"OpenAI embeddings request failed: {exc}") from exc
        return response.data

    def _finish(self, vector: Sequence[float]) -> List[float]:
        if self.normalize:
            return normalize_embedding(vector)
        return [float(value) for value in vector]


__all__ = ["OpenAIEmbeddingProvider", "DEFAULT_EMBEDDING_MODEL", "DEFAULT_EMBED_BATCH_SIZE"]
