import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docstore.api.routes import router as api_router
from docstore.config import public_settings, settings, setup_logging
from docstore.vector_store import get_store
from docstore.vector_store.json_store import EmbeddingStore

logger = setup_logging()


def create_app(store_factory: Callable[[], EmbeddingStore] = get_store) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = store_factory()
        app.state.store = store
        logger.info("Document store ready", extra={"documents": len(store), "path": str(store.file_path)})
        try:
            yield
        finally:
            store.destroy()
            logger.info("Document store released")

    app = FastAPI(title="Semantic Document Store", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(api_router)
    return app


logger.info("Application starting")
logger.info("Loaded settings: %s", public_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("docstore.main:app", host=settings.app_host, port=settings.app_port)
