"""
Vector math used by the store: L2 normalization and cosine similarity.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np


def normalize_embedding(embedding: Sequence[float]) -> List[float]:
    """
    L2-normalize a vector.

    A zero vector is returned unchanged (as a copy) instead of producing NaNs.
    """
    vector = np.asarray(embedding, dtype=np.float32)
    norm = float(np.linalg.norm(vector))
    if norm == 0.0:
        return [float(value) for value in embedding]
    return (vector / np.float32(norm)).tolist()


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two unit-length vectors, i.e. their dot product.

    Vectors of different length score exactly 0.0 so stores holding
    embeddings from more than one model keep answering queries.
    """
    if len(a) != len(b):
        return 0.0
    return float(np.dot(np.asarray(a, dtype=np.float32), np.asarray(b, dtype=np.float32)))


def vector_norm(embedding: Sequence[float]) -> float:
    return float(np.linalg.norm(np.asarray(embedding, dtype=np.float32)))


__all__ = ["normalize_embedding", "cosine_similarity", "vector_norm"]
