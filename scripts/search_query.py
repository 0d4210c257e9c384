"""
CLI for searching the embeddings file with a text query.

Example:
    python -m scripts.search_query --query "quarterly planning notes" --top-k 5
"""

from __future__ import annotations

import argparse

from docstore.config import settings
from docstore.vector_store import get_store


def main() -> None:
    parser = argparse.ArgumentParser(description="Search indexed chunks by text query.")
    parser.add_argument("--query", "-q", required=True, help="Query text")
    parser.add_argument("--top-k", type=int, default=settings.search_top_k, help="How many results to return")
    parser.add_argument("--threshold", type=float, default=settings.search_threshold, help="Minimum similarity")
    parser.add_argument("--snippet", type=int, default=300, help="Snippet length")
    args = parser.parse_args()

    with get_store() as store:
        results = store.search(args.query, top_k=args.top_k, threshold=args.threshold)

    if not results:
        print("No results")
        return

    for idx, result in enumerate(results, start=1):
        doc = result.document
        snippet = doc.content[: args.snippet]
        print(f"\n#{idx} similarity={result.similarity:.4f} id={doc.id}")
        print(f"title: {doc.title} url: {doc.url} depth: {doc.depth}")
        print("text:", snippet + ("..." if len(doc.content) > args.snippet else ""))


if __name__ == "__main__":
    main()
