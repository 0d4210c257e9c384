from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator


# Persisted file
class StoredDocument(BaseModel):
    """Один документ в файле эмбеддингов."""

    id: str
    content: str
    url: str = ""
    title: str = ""
    embedding: List[float] = Field(default_factory=list)
    depth: int = 0


class StoreFile(BaseModel):
    """Корень файла эмбеддингов."""

    documents: List[StoredDocument] = Field(default_factory=list)
    last_updated: str = ""

    @field_validator("documents", mode="before")
    @classmethod
    def _null_documents(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("last_updated", mode="before")
    @classmethod
    def _null_timestamp(cls, value: object) -> object:
        return "" if value is None else value


# Search
class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="Текст запроса")
    top_k: int | None = Field(default=None, description="Сколько результатов вернуть; 0 или меньше означает без ограничения")
    threshold: float | None = Field(default=None, ge=-1, le=1, description="Минимальное сходство")


class SearchHit(BaseModel):
    id: str
    url: str
    title: str
    content: str
    depth: int
    similarity: float


class SearchResponse(BaseModel):
    results: List[SearchHit]


# Admin
class IndexRequest(BaseModel):
    """Запрос на индексацию текста."""

    text: str = Field(..., min_length=1)
    url: str = ""
    title: str = ""
    depth: int = Field(default=0, ge=0)


class IndexResponse(BaseModel):
    indexed_chunks: int = Field(..., ge=0, description="Сколько чанков проиндексировано")
    total_documents: int = Field(..., ge=0)


class StoreStatus(BaseModel):
    documents: int = Field(..., ge=0)
    last_updated: str
    stale: bool


__all__ = [
    "StoredDocument",
    "StoreFile",
    "SearchRequest",
    "SearchHit",
    "SearchResponse",
    "IndexRequest",
    "IndexResponse",
    "StoreStatus",
]
