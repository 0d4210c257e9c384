"""
Text chunking utilities.
"""

from __future__ import annotations

import re
from typing import List

from docstore.config import settings
from docstore.errors import ConfigError

CHUNK_SIZE_WORDS = settings.chunk_size_words
CHUNK_OVERLAP_WORDS = settings.chunk_overlap_words

_WHITESPACE = re.compile(r"\s+")


def chunk_text(text: str, chunk_size: int = CHUNK_SIZE_WORDS, overlap: int = CHUNK_OVERLAP_WORDS) -> List[str]:
    """
    Split text into windows of ``chunk_size`` words, each starting
    ``chunk_size - overlap`` words after the previous one.

    The last window ends at the last word; empty text gives no chunks.
    """
    if chunk_size <= 0:
        raise ConfigError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0 or overlap >= chunk_size:
        raise ConfigError(f"overlap must be in [0, chunk_size), got overlap={overlap} chunk_size={chunk_size}")

    words = _WHITESPACE.sub(" ", text).strip().split(" ")
    if words == [""]:
        return []

    step = chunk_size - overlap
    chunks: List[str] = []
    for start in range(0, len(words), step):
        end = min(start + chunk_size, len(words))
        chunks.append(" ".join(words[start:end]))
        if end == len(words):
            break
    return chunks


__all__ = ["chunk_text", "CHUNK_SIZE_WORDS", "CHUNK_OVERLAP_WORDS"]
