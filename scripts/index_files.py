"""
CLI for rebuilding the embeddings file from local text files.

Example:
    python -m scripts.index_files --path ./data/corpus --force
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from docstore.config import setup_logging
from docstore.indexing.pipeline import IndexingService, TextSource
from docstore.vector_store import get_store

TEXT_SUFFIXES = {".txt", ".md"}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rebuild the embeddings file from text files.")
    parser.add_argument("--path", required=True, help="File or directory with .txt/.md sources")
    parser.add_argument("--force", action="store_true", help="Reindex even if embeddings are fresh")
    return parser.parse_args()


def collect_sources(root: Path) -> List[TextSource]:
    paths = [root] if root.is_file() else sorted(p for p in root.rglob("*") if p.suffix in TEXT_SUFFIXES)
    return [
        TextSource(text=path.read_text(encoding="utf-8"), url=path.resolve().as_uri(), title=path.stem)
        for path in paths
    ]


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    try:
        with get_store() as store:
            summary = IndexingService(store, logger_=logger).reindex(collect_sources(Path(args.path)), force=args.force)
    except Exception:
        logger.exception("Indexing failed")
        sys.exit(1)

    if summary.skipped:
        print("Embeddings are fresh; nothing to do (use --force to reindex).")
        return
    print(
        f"Indexed chunks: {summary.indexed_chunks} from {summary.sources} sources "
        f"(elapsed {summary.elapsed_sec:.2f}s)"
    )


if __name__ == "__main__":
    main()
