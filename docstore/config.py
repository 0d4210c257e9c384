"""
Application configuration loaded from environment variables.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised application settings."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    embeddings_file_path: str = Field(default="./data/embeddings.json", alias="EMBEDDINGS_FILE_PATH")

    embedding_provider: str = Field(default="openai", alias="EMBEDDING_PROVIDER")
    embedding_model_name: str = Field(default="text-embedding-3-small", alias="EMBEDDING_MODEL_NAME")
    embed_batch_size: int = Field(default=64, gt=0, alias="EMBED_BATCH_SIZE")

    local_model_name: str = Field(default="sentence-transformers/all-MiniLM-L6-v2", alias="LOCAL_MODEL_NAME")
    local_model_backend: str | None = Field(default=None, alias="LOCAL_MODEL_BACKEND")

    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(default=None, alias="OPENAI_BASE_URL")
    openai_timeout_sec: float = Field(default=30.0, gt=0, alias="OPENAI_TIMEOUT_SEC")
    openai_max_retries: int = Field(default=2, ge=0, alias="OPENAI_MAX_RETRIES")

    chunk_size_words: int = Field(default=200, alias="CHUNK_SIZE_WORDS")
    chunk_overlap_words: int = Field(default=50, alias="CHUNK_OVERLAP_WORDS")

    search_top_k: int = Field(default=5, alias="SEARCH_TOP_K")
    search_threshold: float = Field(default=0.3, alias="SEARCH_THRESHOLD")

    max_age_days: int = Field(default=7, ge=0, alias="MAX_AGE_DAYS")
    max_crawl_depth: int = Field(default=2, ge=0, alias="MAX_CRAWL_DEPTH")

    admin_token: SecretStr | None = Field(default=None, alias="ADMIN_TOKEN")

    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


settings = Settings()


def setup_logging() -> logging.Logger:
    """
    Configure base logging for the app.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    return logging.getLogger("docstore")


def public_settings() -> Dict[str, Any]:
    """
    Return settings without secrets for safe logging/inspection.
    """
    return settings.model_dump(
        exclude={"openai_api_key", "admin_token"},
        exclude_none=True,
    )


__all__ = ["Settings", "settings", "setup_logging", "public_settings"]
