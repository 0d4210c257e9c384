"""
Indexing pipeline: chunk text, embed, normalize, and add into the document store.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, List

from tqdm import tqdm

from docstore.config import Settings, settings
from docstore.embeddings.base import EmbeddingProvider
from docstore.errors import ProviderError
from docstore.indexing.chunker import chunk_text
from docstore.vector_store.base import DocumentStore, EmbeddingDocument
from docstore.vector_store.similarity import normalize_embedding

logger = logging.getLogger(__name__)


@dataclass
class TextSource:
    text: str
    url: str = ""
    title: str = ""
    depth: int = 0


def build_documents(
    text: str,
    provider: EmbeddingProvider,
    *,
    url: str = "",
    title: str = "",
    depth: int = 0,
    id_prefix: str | None = None,
    chunk_size: int = settings.chunk_size_words,
    overlap: int = settings.chunk_overlap_words,
    embed_batch: int = settings.embed_batch_size,
) -> List[EmbeddingDocument]:
    chunks = chunk_text(text, chunk_size, overlap)
    prefix = id_prefix or url or title or "doc"

    documents: List[EmbeddingDocument] = []
    for i in range(0, len(chunks), max(1, embed_batch)):
        batch = chunks[i : i + max(1, embed_batch)]
        embeddings = provider.get_embeddings_batch(batch)
        if len(embeddings) != len(batch):
            raise ProviderError(f"expected {len(batch)} embeddings, got {len(embeddings)}")
        for offset, (chunk, embedding) in enumerate(zip(batch, embeddings)):
            documents.append(
                EmbeddingDocument(
                    id=f"{prefix}#{i + offset:04d}",
                    content=chunk,
                    url=url,
                    title=title,
                    embedding=normalize_embedding(embedding),
                    depth=depth,
                )
            )
    return documents


def index_text(store: DocumentStore, text: str, **kwargs) -> int:
    """Chunk and embed ``text`` with the store's provider and add the chunks. Returns the chunk count."""
    documents = build_documents(text, store, **kwargs)
    store.add_documents(documents)
    return len(documents)


@dataclass
class IndexSummary:
    indexed_chunks: int
    sources: int
    elapsed_sec: float
    skipped: bool = False


class IndexingService:
    """Rebuilds the store from a set of text sources when it has gone stale."""

    def __init__(
        self,
        store: DocumentStore,
        config: Settings | None = None,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.config = config or settings
        self.logger = logger_ or logging.getLogger(__name__)

    def reindex(self, sources: Iterable[TextSource], *, force: bool = False) -> IndexSummary:
        started = time.time()
        if not force and not self.store.is_stale(self.config.max_age_days):
            self.logger.info("Embeddings are fresh, skipping reindex", extra={"max_age_days": self.config.max_age_days})
            return IndexSummary(indexed_chunks=0, sources=0, elapsed_sec=time.time() - started, skipped=True)

        sources = list(sources)
        documents: List[EmbeddingDocument] = []
        for source in tqdm(sources, desc="Indexing", unit="sources"):
            built = build_documents(
                source.text,
                self.store,
                url=source.url,
                title=source.title,
                depth=source.depth,
                chunk_size=self.config.chunk_size_words,
                overlap=self.config.chunk_overlap_words,
                embed_batch=self.config.embed_batch_size,
            )
            documents.extend(built)
            self.logger.info("Embedded source", extra={"url": source.url, "title": source.title, "chunks": len(built)})

        # The live corpus is untouched until every source has embedded.
        self.store.replace_documents(documents)
        self.store.save()
        indexed = len(documents)

        elapsed = time.time() - started
        self.logger.info(
            "Reindex completed",
            extra={"chunks_indexed": indexed, "sources": len(sources), "elapsed_sec": round(elapsed, 2)},
        )
        return IndexSummary(indexed_chunks=indexed, sources=len(sources), elapsed_sec=elapsed)


__all__ = ["TextSource", "build_documents", "index_text", "IndexSummary", "IndexingService"]
