"""
Document store interface and shared types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence, Tuple


@dataclass
class EmbeddingDocument:
    id: str
    content: str
    url: str = ""
    title: str = ""
    embedding: List[float] = field(default_factory=list)
    depth: int = 0


@dataclass
class SearchResult:
    document: EmbeddingDocument
    similarity: float


@dataclass
class SearchDiagnostics:
    """Per-query scoring details handed to an optional search observer."""

    query: str
    query_dimension: int
    document_dimension: int
    query_norm: float
    top_scores: List[Tuple[float, str]]
    matched: int


class DocumentStore(Protocol):
    def add_documents(self, documents: Sequence[EmbeddingDocument]) -> None:
        ...

    def replace_documents(self, documents: Sequence[EmbeddingDocument]) -> None:
        ...

    def clear(self) -> None:
        ...

    def save(self) -> None:
        ...

    def is_stale(self, max_age_days: int) -> bool:
        ...

    def get_embedding(self, text: str) -> List[float]:
        ...

    def get_embeddings_batch(self, texts: Sequence[str]) -> List[List[float]]:
        ...

    def search(self, query: str, top_k: int, threshold: float) -> List[SearchResult]:
        ...


__all__ = ["EmbeddingDocument", "SearchResult", "SearchDiagnostics", "DocumentStore"]
