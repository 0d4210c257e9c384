"""
JSON-file backed document store with exact cosine search.
"""

from __future__ import annotations

import heapq
import json
import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from operator import itemgetter
from pathlib import Path
from typing import Callable, List, Sequence

from pydantic import ValidationError

from docstore.embeddings.base import EmbeddingProvider
from docstore.errors import ConfigError, PersistenceError
from docstore.models.schemas import StoredDocument, StoreFile
from docstore.vector_store.base import EmbeddingDocument, SearchDiagnostics, SearchResult
from docstore.vector_store.locking import ReadWriteLock
from docstore.vector_store.similarity import cosine_similarity, vector_norm

DIAGNOSTIC_TOP_SCORES = 5
PREVIEW_CHARS = 100

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
SearchObserver = Callable[[SearchDiagnostics], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _preview(content: str) -> str:
    if len(content) > PREVIEW_CHARS:
        return content[:PREVIEW_CHARS] + "..."
    return content


class EmbeddingStore:
    """
    In-memory collection of embedded chunks persisted to a single JSON file.

    Safe for concurrent use: mutations take the exclusive side of a
    reader/writer lock, reads and the search scan take the shared side.
    The store may own one runtime ``resource`` (e.g. a local model session),
    released by ``destroy()``; the persisted file is never deleted.
    """

    def __init__(
        self,
        file_path: str | Path,
        provider: EmbeddingProvider | None = None,
        *,
        resource: object | None = None,
        clock: Clock | None = None,
        on_search: SearchObserver | None = None,
    ) -> None:
        self._path = Path(file_path)
        self._provider = provider
        self._resource = resource
        self._clock = clock or _utcnow
        self._on_search = on_search
        self._documents: List[EmbeddingDocument] = []
        self._last_updated = ""
        self._lock = ReadWriteLock()

    # --- Persistence ---
    def load(self) -> None:
        with self._lock.write_locked():
            try:
                raw = self._path.read_text(encoding="utf-8")
            except FileNotFoundError:
                logger.info("Embeddings file does not exist, starting fresh", extra={"path": str(self._path)})
                return
            except OSError as exc:
                raise PersistenceError(f"failed to read embeddings file {self._path}: {exc}") from exc

            try:
                data = StoreFile.model_validate(json.loads(raw))
            except (json.JSONDecodeError, ValidationError) as exc:
                raise PersistenceError(f"failed to parse embeddings file {self._path}: {exc}") from exc

            self._documents = [EmbeddingDocument(**doc.model_dump()) for doc in data.documents]
            self._last_updated = data.last_updated
            logger.info("Loaded embeddings", extra={"count": len(self._documents), "path": str(self._path)})

    def save(self) -> None:
        with self._lock.write_locked():
            stamp = self._clock().isoformat(timespec="seconds")
            payload = StoreFile(
                documents=[StoredDocument(**vars(doc)) for doc in self._documents],
                last_updated=stamp,
            )
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._path.write_text(json.dumps(payload.model_dump(), indent=2), encoding="utf-8")
            except OSError as exc:
                raise PersistenceError(f"failed to write embeddings file {self._path}: {exc}") from exc
            self._last_updated = stamp
            logger.info("Saved embeddings", extra={"count": len(self._documents), "path": str(self._path)})

    # --- Mutation ---
    def add_document(self, document: EmbeddingDocument) -> None:
        with self._lock.write_locked():
            self._documents.append(document)

    def add_documents(self, documents: Sequence[EmbeddingDocument]) -> None:
        with self._lock.write_locked():
            self._documents.extend(documents)

    def replace_documents(self, documents: Sequence[EmbeddingDocument]) -> None:
        """Swap the whole corpus in one step; readers see either the old or the new set."""
        with self._lock.write_locked():
            self._documents = list(documents)

    def clear(self) -> None:
        with self._lock.write_locked():
            self._documents = []
            self._last_updated = ""

    def set_provider(self, provider: EmbeddingProvider | None) -> None:
        with self._lock.write_locked():
            self._provider = provider

    # --- Reads ---
    @property
    def file_path(self) -> Path:
        return self._path

    @property
    def last_updated(self) -> str:
        with self._lock.read_locked():
            return self._last_updated

    def documents(self) -> List[EmbeddingDocument]:
        with self._lock.read_locked():
            return [replace(doc, embedding=list(doc.embedding)) for doc in self._documents]

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._documents)

    def is_stale(self, max_age_days: int) -> bool:
        with self._lock.read_locked():
            last_updated = self._last_updated
        if not last_updated:
            return True

        try:
            saved_at = datetime.fromisoformat(last_updated)
        except ValueError:
            logger.warning("Failed to parse last_updated timestamp", extra={"last_updated": last_updated})
            return True
        if saved_at.tzinfo is None:
            saved_at = saved_at.replace(tzinfo=timezone.utc)

        return self._clock() - saved_at > timedelta(days=max_age_days)

    # --- Embeddings ---
    def get_embedding(self, text: str) -> List[float]:
        return self._require_provider().get_embedding(text)

    def get_embeddings_batch(self, texts: Sequence[str]) -> List[List[float]]:
        return self._require_provider().get_embeddings_batch(texts)

    def _require_provider(self) -> EmbeddingProvider:
        with self._lock.read_locked():
            provider = self._provider
        if provider is None:
            raise ConfigError("embedding provider not initialized")
        return provider

    # --- Search ---
    def search(self, query: str, top_k: int, threshold: float) -> List[SearchResult]:
        """
        Rank stored documents by cosine similarity to ``query``.

        Keeps documents with ``similarity >= threshold``, best first, ties in
        insertion order. ``top_k <= 0`` returns every match.
        """
        if len(self) == 0:
            return []

        query_embedding = self.get_embedding(query)

        with self._lock.read_locked():
            scored = [(cosine_similarity(query_embedding, doc.embedding), doc) for doc in self._documents]
            if not scored:
                return []
            kept = sorted(
                (item for item in scored if item[0] >= threshold),
                key=itemgetter(0),
                reverse=True,
            )
            matches = [
                SearchResult(document=replace(doc, embedding=list(doc.embedding)), similarity=similarity)
                for similarity, doc in kept
            ]
            best = heapq.nlargest(DIAGNOSTIC_TOP_SCORES, scored, key=itemgetter(0))
            diagnostics = SearchDiagnostics(
                query=query,
                query_dimension=len(query_embedding),
                document_dimension=len(self._documents[0].embedding),
                query_norm=vector_norm(query_embedding),
                top_scores=[(score, _preview(doc.content)) for score, doc in best],
                matched=len(matches),
            )

        if top_k > 0 and len(matches) > top_k:
            matches = matches[:top_k]

        self._report(diagnostics)
        return matches

    def _report(self, diagnostics: SearchDiagnostics) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Search scored",
                extra={
                    "query_dimension": diagnostics.query_dimension,
                    "document_dimension": diagnostics.document_dimension,
                    "query_norm": round(diagnostics.query_norm, 6),
                    "top_scores": [round(score, 4) for score, _ in diagnostics.top_scores],
                    "matched": diagnostics.matched,
                },
            )
        if self._on_search is not None:
            self._on_search(diagnostics)

    # --- Lifecycle ---
    def destroy(self) -> None:
        """Release the owned runtime resource. The embeddings file is left untouched."""
        with self._lock.write_locked():
            resource, self._resource = self._resource, None
        if resource is not None:
            resource.close()  # type: ignore[attr-defined]

    def __enter__(self) -> "EmbeddingStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()


__all__ = ["EmbeddingStore", "Clock", "SearchObserver"]
