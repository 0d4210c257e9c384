"""
Link extraction for crawl-driven ingestion.
"""

from __future__ import annotations

import re
from typing import List, Tuple


def extract_links(content: str, base_prefix: str) -> List[str]:
    """
    Find every ``base_prefix`` followed by a run of letters, digits or hyphens.

    e.g. ``extract_links(page, "https://www.notion.so/")``. Duplicates are
    dropped, first occurrence wins.
    """
    pattern = re.compile(re.escape(base_prefix) + r"[a-zA-Z0-9\-]+")
    return list(dict.fromkeys(pattern.findall(content)))


def crawl_links(content: str, base_prefix: str, depth: int, max_depth: int) -> List[Tuple[str, int]]:
    """
    Follow-up ``(url, depth)`` pairs for a page found at ``depth``.
    Nothing is returned once ``max_depth`` is reached.
    """
    if depth >= max_depth:
        return []
    return [(url, depth + 1) for url in extract_links(content, base_prefix)]


__all__ = ["extract_links", "crawl_links"]
