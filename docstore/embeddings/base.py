"""
Embedding provider capability.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Anything that turns text into vectors.

    ``get_embeddings_batch`` must return one vector per input, in input
    order. Failures surface as ``ProviderError``.
    """

    def get_embedding(self, text: str) -> List[float]:
        ...

    def get_embeddings_batch(self, texts: Sequence[str]) -> List[List[float]]:
        ...


__all__ = ["EmbeddingProvider"]
