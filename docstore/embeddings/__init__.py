"""
Embedding provider abstractions and factories.
"""

from __future__ import annotations

from typing import Tuple

from docstore.config import Settings, settings
from docstore.embeddings.base import EmbeddingProvider
from docstore.errors import ConfigError

DEFAULT_EMBEDDING_PROVIDER = settings.embedding_provider


def get_embedding_provider(config: Settings | None = None) -> Tuple[EmbeddingProvider, object | None]:
    """
    Factory to obtain the configured provider.

    Returns ``(provider, resource)``; ``resource`` is the runtime handle the
    caller must close (``None`` for remote backends).
    """
    config = config or settings
    backend = config.embedding_provider.lower()
    if backend == "openai":
        from docstore.embeddings.client import OpenAIEmbeddingProvider

        provider = OpenAIEmbeddingProvider(
            model=config.embedding_model_name,
            batch_size=config.embed_batch_size,
            api_key=config.openai_api_key.get_secret_value() if config.openai_api_key else None,
            base_url=config.openai_base_url,
            timeout=config.openai_timeout_sec,
            max_retries=config.openai_max_retries,
        )
        return provider, None
    if backend == "local":
        from docstore.embeddings.local import LocalEmbeddingProvider, LocalModelSession

        session = LocalModelSession(config.local_model_name, backend=config.local_model_backend).open()
        return LocalEmbeddingProvider(session), session
    raise ConfigError(f"Unsupported embedding provider: {backend}")


__all__ = ["DEFAULT_EMBEDDING_PROVIDER", "EmbeddingProvider", "get_embedding_provider"]
