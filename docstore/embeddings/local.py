"""
On-device embeddings backed by a sentence-transformers model.

The model is held by a ``LocalModelSession`` that the caller owns and closes;
``LocalEmbeddingProvider`` only borrows it.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Sequence

from docstore.config import settings
from docstore.errors import ProviderError

DEFAULT_LOCAL_MODEL = settings.local_model_name

logger = logging.getLogger(__name__)


class LocalModelSession:
    """
    Explicitly owned handle on a loaded embedding model.

    Use as a context manager, or call ``open()`` and ``close()`` yourself.
    ``close()`` is idempotent. A preloaded ``model`` (anything with a
    sentence-transformers style ``encode``) may be passed in.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_LOCAL_MODEL,
        *,
        backend: str | None = None,
        device: str | None = None,
        model: Any | None = None,
    ) -> None:
        self.model_name = model_name
        self.backend = backend
        self.device = device
        self._model = model
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._model is not None

    def open(self) -> "LocalModelSession":
        with self._lock:
            if self._model is None:
                self._model = self._load_model()
                logger.info("Local embedding model loaded", extra={"model": self.model_name, "backend": self.backend})
        return self

    def close(self) -> None:
        with self._lock:
            if self._model is None:
                return
            self._model = None
        logger.info("Local embedding model released", extra={"model": self.model_name})

    def encode(self, texts: List[str]) -> List[List[float]]:
        model = self._model
        if model is None:
            raise ProviderError("embedding pipeline not initialized")
        try:
            vectors = model.encode(texts, normalize_embeddings=True, convert_to_numpy=True)
        except Exception as exc:
            raise ProviderError(f"failed to generate embeddings: {exc}") from exc
        return [[float(value) for value in vector] for vector in vectors]

    def _load_model(self) -> Any:
        from sentence_transformers import SentenceTransformer

        kwargs: dict[str, Any] = {}
        if self.backend:
            kwargs["backend"] = self.backend
        if self.device:
            kwargs["device"] = self.device
        try:
            return SentenceTransformer(self.model_name, **kwargs)
        except Exception as exc:
            raise ProviderError(f"failed to load model {self.model_name}: {exc}") from exc

    def __enter__(self) -> "LocalModelSession":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class LocalEmbeddingProvider:
    def __init__(self, session: LocalModelSession) -> None:
        self.session = session

    def get_embedding(self, text: str) -> List[float]:
        vectors = self.session.encode([text])
        if not vectors or not vectors[0]:
            raise ProviderError("empty embedding result")
        return vectors[0]

    def get_embeddings_batch(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []
        vectors = self.session.encode(list(texts))
        if len(vectors) != len(texts) or any(not vector for vector in vectors):
            raise ProviderError("empty embedding result")
        return vectors


__all__ = ["LocalModelSession", "LocalEmbeddingProvider", "DEFAULT_LOCAL_MODEL"]
