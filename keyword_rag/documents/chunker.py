"""Word-budget chunking strategies.

Two strategies share one contract: whitespace is normalized, sizes are
counted in words, and each chunk gets a contiguous-by-construction index
and the id ``{document_id}-chunk-{index}``.
"""

import re
from abc import ABC, abstractmethod

from pydantic import BaseModel, Field, model_validator

from keyword_rag.documents.models import Chunk
from keyword_rag.exceptions import ChunkingError
from keyword_rag.logging_config import get_logger

logger = get_logger(__name__)

WHITESPACE_PATTERN = re.compile(r"\s+")
PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\s*\n")


class ChunkingOptions(BaseModel):
    """Configuration for text chunking.

    Attributes:
        chunk_size: Word budget per chunk.
        overlap: Words carried from the end of one chunk into the next.
        preserve_paragraphs: Align chunk boundaries with paragraphs instead
            of sliding a fixed word window.
    """

    chunk_size: int = Field(default=500, ge=1, description="Words per chunk")
    overlap: int = Field(default=50, ge=0, description="Overlapping words")
    preserve_paragraphs: bool = Field(
        default=True,
        description="Keep paragraphs intact",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "ChunkingOptions":
        if self.overlap >= self.chunk_size:
            raise ValueError("overlap must be less than chunk_size")
        return self

    @property
    def step(self) -> int:
        """Words a sliding window advances per chunk."""
        return self.chunk_size - self.overlap


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return WHITESPACE_PATTERN.sub(" ", text).strip()


class Chunker(ABC):
    """Abstract base class for chunking strategies."""

    def __init__(self, options: ChunkingOptions | None = None) -> None:
        """Initialize chunker with options.

        Raises:
            ChunkingError: If the options cannot advance through text.
        """
        self.options = options or ChunkingOptions()
        if self.options.step <= 0:
            raise ChunkingError(
                "overlap must be less than chunk_size",
                details={
                    "chunk_size": self.options.chunk_size,
                    "overlap": self.options.overlap,
                },
            )

    @abstractmethod
    def chunk(self, text: str, document_id: str, document_name: str) -> list[Chunk]:
        """Split text into chunks belonging to one document.

        Args:
            text: Raw document text; may be empty.
            document_id: Owning document identifier.
            document_name: Owning document display name.

        Returns:
            Ordered chunks (empty for blank text).
        """
        ...

    @staticmethod
    def _create_chunk(
        words: list[str],
        document_id: str,
        document_name: str,
        index: int,
    ) -> Chunk:
        return Chunk(
            id=Chunk.make_id(document_id, index),
            document_id=document_id,
            document_name=document_name,
            content=" ".join(words),
            index=index,
        )


class ParagraphChunker(Chunker):
    """Greedily pack whole paragraphs into chunks.

    A chunk is closed when the next paragraph would push it over the word
    budget; the following chunk starts with the last ``overlap`` words of
    the closed one. Paragraphs are never split, so an oversized paragraph
    becomes an oversized chunk.

    Paragraph breaks are found before whitespace is normalized; normalizing
    first would erase them and always yield a single chunk.
    """

    def chunk(self, text: str, document_id: str, document_name: str) -> list[Chunk]:
        paragraphs = [
            words
            for words in (
                normalize_whitespace(p).split() for p in PARAGRAPH_BREAK_PATTERN.split(text)
            )
            if words
        ]

        chunks: list[Chunk] = []
        buffer: list[str] = []

        for words in paragraphs:
            if len(buffer) + len(words) > self.options.chunk_size:
                if buffer:
                    chunks.append(
                        self._create_chunk(buffer, document_id, document_name, len(chunks))
                    )
                carried = buffer[-self.options.overlap :] if self.options.overlap else []
                buffer = carried + words
            else:
                buffer = buffer + words

        if buffer:
            chunks.append(self._create_chunk(buffer, document_id, document_name, len(chunks)))

        return chunks


class WordWindowChunker(Chunker):
    """Slide a fixed window of ``chunk_size`` words over the text.

    The window advances ``chunk_size - overlap`` words per step and the
    chunk index is the window start divided by that step.
    """

    def chunk(self, text: str, document_id: str, document_name: str) -> list[Chunk]:
        normalized = normalize_whitespace(text)
        if not normalized:
            return []

        words = normalized.split(" ")
        step = self.options.step
        size = self.options.chunk_size

        return [
            self._create_chunk(words[start : start + size], document_id, document_name, start // step)
            for start in range(0, len(words), step)
        ]


def get_chunker(options: ChunkingOptions | None = None) -> Chunker:
    """Pick the chunking strategy selected by ``options``."""
    options = options or ChunkingOptions()
    if options.preserve_paragraphs:
        return ParagraphChunker(options)
    return WordWindowChunker(options)


def chunk_text(
    text: str,
    document_id: str,
    document_name: str,
    options: ChunkingOptions | None = None,
) -> list[Chunk]:
    """Split document text into overlapping word-budget chunks.

    Args:
        text: Raw text; empty or blank text yields no chunks.
        document_id: Owning document identifier.
        document_name: Owning document display name.
        options: Chunking options; defaults to 500 words, 50 overlap,
            paragraph-aligned.

    Returns:
        Ordered list of chunks.

    Raises:
        ChunkingError: If ``overlap`` is not smaller than ``chunk_size``.
    """
    chunker = get_chunker(options)
    chunks = chunker.chunk(text, document_id, document_name)
    logger.debug(
        "Chunked document",
        extra={
            "document_id": document_id,
            "strategy": type(chunker).__name__,
            "chunks": len(chunks),
        },
    )
    return chunks
