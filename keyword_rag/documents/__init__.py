"""Document ingestion and chunking."""

from keyword_rag.documents.chunker import (
    Chunker,
    ChunkingOptions,
    ParagraphChunker,
    WordWindowChunker,
    chunk_text,
    get_chunker,
    normalize_whitespace,
)
from keyword_rag.documents.fetcher import UrlFetcher
from keyword_rag.documents.html_text import html_to_text
from keyword_rag.documents.loader import DocumentLoader, TextFileLoader
from keyword_rag.documents.models import Chunk, Document, SourceKind, generate_document_id
from keyword_rag.documents.tokens import estimate_token_count, validate_document_size

__all__ = [
    "Chunk",
    "Chunker",
    "ChunkingOptions",
    "Document",
    "DocumentLoader",
    "ParagraphChunker",
    "SourceKind",
    "TextFileLoader",
    "UrlFetcher",
    "WordWindowChunker",
    "chunk_text",
    "estimate_token_count",
    "generate_document_id",
    "get_chunker",
    "html_to_text",
    "normalize_whitespace",
    "validate_document_size",
]
