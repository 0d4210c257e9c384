"""
Utility script to inspect stored chunks without embeddings.

Usage:
    python -m scripts.inspect_index --limit 5 --offset 0
"""

from __future__ import annotations

import argparse
import json

from docstore.config import settings
from docstore.vector_store.json_store import EmbeddingStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect stored chunks in the embeddings file.")
    parser.add_argument("--limit", type=int, default=5, help="Number of documents to show")
    parser.add_argument("--offset", type=int, default=0, help="Offset for pagination")
    parser.add_argument("--path", default=settings.embeddings_file_path, help="Embeddings file")
    args = parser.parse_args()

    # No provider needed to read the file.
    store = EmbeddingStore(args.path)
    store.load()
    documents = store.documents()

    print(f"Total documents in store: {len(documents)}")
    print(f"Last updated: {store.last_updated or '<never>'}  stale: {store.is_stale(settings.max_age_days)}")
    page = documents[args.offset : args.offset + args.limit]
    print(f"Showing {len(page)} documents (offset={args.offset}, limit={args.limit})")
    for idx, doc in enumerate(page, start=args.offset + 1):
        print(f"\n#{idx}: {doc.id or '<no-id>'}")
        meta = {"title": doc.title, "url": doc.url, "depth": doc.depth, "dimension": len(doc.embedding)}
        print("Metadata:", json.dumps(meta, ensure_ascii=False))
        snippet = doc.content[:400].replace("\n", " ")
        print("Text:", snippet + ("..." if len(doc.content) > 400 else ""))


if __name__ == "__main__":
    main()
