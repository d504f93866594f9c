#!/usr/bin/env python
"""Search local text files with keyword retrieval.

Usage:
    python -m scripts.search_docs "refund policy" docs/*.md --top-k 5

Prints the ranked chunks with their scores, or with --prompt the
grounding prefix that would be handed to a generation call. Exits with
status 1 when nothing is retrieved.
"""

import argparse
import sys
from pathlib import Path

from keyword_rag.config import get_settings
from keyword_rag.documents.chunker import ChunkingOptions
from keyword_rag.exceptions import DocumentError
from keyword_rag.logging_config import get_logger, setup_logging
from keyword_rag.rag.knowledge_base import KnowledgeBase
from keyword_rag.retrieval.context import build_prompt_prefix, format_chunk

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Command line interface definition."""
    chunking = get_settings().chunking
    parser = argparse.ArgumentParser(
        description="Rank passages of local text files against a query",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("query", help="Search query")
    parser.add_argument("files", type=Path, nargs="+", help="Text files to search")
    parser.add_argument("--top-k", type=int, default=get_settings().retrieval.top_k)
    parser.add_argument("--chunk-size", type=int, default=chunking.chunk_size, help="Words per chunk")
    parser.add_argument("--overlap", type=int, default=chunking.overlap, help="Overlapping words")
    parser.add_argument(
        "--no-paragraphs",
        action="store_true",
        help="Use a sliding word window instead of paragraph-aligned chunks",
    )
    parser.add_argument(
        "--prompt",
        action="store_true",
        help="Print the grounding prompt prefix instead of the ranked list",
    )
    parser.add_argument("--log-level", default="WARNING")
    return parser


def run(args: argparse.Namespace) -> int:
    """Load the files, retrieve and print. Returns the exit status."""
    if args.top_k < 0:
        print(f"Invalid --top-k: {args.top_k} (must not be negative)", file=sys.stderr)
        return 2

    try:
        options = ChunkingOptions(
            chunk_size=args.chunk_size,
            overlap=args.overlap,
            preserve_paragraphs=not args.no_paragraphs,
        )
    except ValueError as e:
        print(f"Invalid chunking options: {e}", file=sys.stderr)
        return 2

    knowledge_base = KnowledgeBase(options=options)
    for path in args.files:
        try:
            knowledge_base.add_file(path)
        except DocumentError as e:
            logger.warning("Skipping %s: %s", path, e.message)

    result = knowledge_base.retrieve(args.query, args.top_k)
    if not result.chunks:
        print("No passages found.", file=sys.stderr)
        return 1

    if args.prompt:
        print(build_prompt_prefix(result))
        return 0

    for rank, (chunk, score) in enumerate(zip(result.chunks, result.scores, strict=True), start=1):
        print(f"#{rank}  score={score:.4f}  {chunk.id}")
        print(format_chunk(chunk))
        print()
    return 0


def main() -> None:
    """Main entry point."""
    args = build_parser().parse_args()
    setup_logging(level=args.log_level, json_output=False)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
