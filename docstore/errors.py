"""
Exception taxonomy shared by the store, providers and chunker.
"""

from __future__ import annotations


class DocStoreError(RuntimeError):
    """Base class for all document store failures."""


class ProviderError(DocStoreError):
    """Raised when an embedding backend is unreachable or returns no usable vector."""


class PersistenceError(DocStoreError):
    """Raised when the embeddings file cannot be read, parsed or written."""


class ConfigError(DocStoreError):
    """Raised for invalid chunking parameters or a missing embedding provider."""


__all__ = ["DocStoreError", "ProviderError", "PersistenceError", "ConfigError"]
