"""
Document store abstractions and factories.
"""

from docstore.config import Settings, settings
from docstore.embeddings import get_embedding_provider
from docstore.vector_store.json_store import EmbeddingStore

DEFAULT_EMBEDDINGS_FILE = settings.embeddings_file_path


def get_store(config: Settings | None = None, *, load: bool = True) -> EmbeddingStore:
    """
    Factory to obtain a store wired to the configured embedding provider.
    The caller owns the returned store and should ``destroy()`` it.
    """
    config = config or settings
    provider, resource = get_embedding_provider(config)
    store = EmbeddingStore(config.embeddings_file_path, provider, resource=resource)
    if load:
        try:
            store.load()
        except Exception:
            store.destroy()
            raise
    return store


__all__ = ["DEFAULT_EMBEDDINGS_FILE", "get_store", "EmbeddingStore"]
