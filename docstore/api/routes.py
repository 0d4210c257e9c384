from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from docstore.config import settings
from docstore.errors import ConfigError, ProviderError
from docstore.indexing.pipeline import index_text
from docstore.models.schemas import (
    IndexRequest,
    IndexResponse,
    SearchHit,
    SearchRequest,
    SearchResponse,
    StoreStatus,
)
from docstore.vector_store.json_store import EmbeddingStore

router = APIRouter()
logger = logging.getLogger(__name__)


def get_document_store(request: Request) -> EmbeddingStore:
    return request.app.state.store


def _check_admin_token(x_admin_token: str | None) -> None:
    if not settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin token is not configured",
        )
    if x_admin_token != settings.admin_token.get_secret_value():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


@router.post("/api/v1/search", response_model=SearchResponse, summary="Semantic search over stored chunks")
def search(request: SearchRequest, store: EmbeddingStore = Depends(get_document_store)) -> SearchResponse:
    query = request.query.strip()
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query must not be empty")

    top_k = request.top_k if request.top_k is not None else settings.search_top_k
    threshold = request.threshold if request.threshold is not None else settings.search_threshold
    logger.info("Search request", extra={"len": len(query), "top_k": top_k, "threshold": threshold})

    try:
        results = store.search(query, top_k=top_k, threshold=threshold)
    except ProviderError as exc:
        logger.warning("Embedding provider failed during search", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ConfigError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    return SearchResponse(
        results=[
            SearchHit(
                id=result.document.id,
                url=result.document.url,
                title=result.document.title,
                content=result.document.content,
                depth=result.document.depth,
                similarity=result.similarity,
            )
            for result in results
        ]
    )


@router.post("/admin/documents", response_model=IndexResponse, summary="Index a text")
def admin_index(
    index_request: IndexRequest,
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    store: EmbeddingStore = Depends(get_document_store),
) -> IndexResponse:
    _check_admin_token(x_admin_token)

    try:
        indexed = index_text(
            store,
            index_request.text,
            url=index_request.url,
            title=index_request.title,
            depth=index_request.depth,
            chunk_size=settings.chunk_size_words,
            overlap=settings.chunk_overlap_words,
            embed_batch=settings.embed_batch_size,
        )
    except ProviderError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ConfigError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    store.save()

    response = IndexResponse(indexed_chunks=indexed, total_documents=len(store))
    logger.info(
        "Admin index completed",
        extra={"indexed_chunks": response.indexed_chunks, "total_documents": response.total_documents},
    )
    return response


@router.post("/admin/clear", summary="Drop every stored chunk")
def admin_clear(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    store: EmbeddingStore = Depends(get_document_store),
) -> dict:
    _check_admin_token(x_admin_token)
    store.clear()
    logger.info("Store cleared")
    return {"status": "cleared"}


@router.get("/admin/status", response_model=StoreStatus, summary="Store size and freshness")
def admin_status(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    store: EmbeddingStore = Depends(get_document_store),
) -> StoreStatus:
    _check_admin_token(x_admin_token)
    return StoreStatus(
        documents=len(store),
        last_updated=store.last_updated,
        stale=store.is_stale(settings.max_age_days),
    )


__all__ = ["router", "get_document_store"]
