"""Document and chunk data models."""

import random
import string
import time
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from keyword_rag.documents.tokens import estimate_token_count
from keyword_rag.exceptions import DocumentError, ErrorCode

if TYPE_CHECKING:
    from keyword_rag.documents.chunker import ChunkingOptions

_ID_ALPHABET = string.ascii_lowercase + string.digits


class SourceKind(str, Enum):
    """Where a document's text came from."""

    PDF = "pdf"
    URL = "url"
    TEXT = "text"


class Chunk(BaseModel):
    """A bounded passage of a document, the unit of retrieval.

    Attributes:
        id: ``{document_id}-chunk-{index}``.
        document_id: Owning document identifier.
        document_name: Owning document display name, used in context labels.
        content: Passage text.
        index: Zero-based position within the document.
        metadata: Free-form extra fields.
    """

    id: str = Field(description="Chunk identifier")
    document_id: str = Field(description="Owning document identifier")
    document_name: str = Field(description="Owning document display name")
    content: str = Field(description="Passage text")
    index: int = Field(ge=0, description="Position within the document")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form extra fields",
    )

    @staticmethod
    def make_id(document_id: str, index: int) -> str:
        """Build the identifier of the chunk at ``index`` of a document."""
        return f"{document_id}-chunk-{index}"


class Document(BaseModel):
    """A source document together with its chunks.

    Attributes:
        id: Unique identifier.
        name: Display name.
        kind: Source kind (pdf, url or text).
        url: Origin URL for fetched documents.
        content: Raw extracted text.
        chunks: Ordered chunks produced from ``content``.
        created_at: When the document was registered.
        metadata: Free-form extra fields.
    """

    id: str = Field(description="Unique document identifier")
    name: str = Field(description="Display name")
    kind: SourceKind = Field(default=SourceKind.TEXT, description="Source kind")
    url: str | None = Field(default=None, description="Origin URL, if fetched")
    content: str = Field(description="Raw extracted text")
    chunks: list[Chunk] = Field(default_factory=list, description="Ordered chunks")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Registration time",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form extra fields",
    )

    @classmethod
    def from_text(
        cls,
        content: str,
        name: str,
        kind: SourceKind = SourceKind.TEXT,
        *,
        document_id: str | None = None,
        url: str | None = None,
        options: "ChunkingOptions | None" = None,
        max_tokens: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "Document":
        """Create a document and chunk its text.

        Args:
            content: Extracted plain text.
            name: Display name.
            kind: Source kind.
            document_id: Identifier to use; generated when omitted.
            url: Origin URL for fetched documents.
            options: Chunking options (defaults apply when omitted).
            max_tokens: Estimated token budget; no limit when omitted.
            metadata: Extra fields stored on the document.

        Returns:
            New Document with its chunks populated.

        Raises:
            DocumentError: If the text exceeds ``max_tokens``.
        """
        from keyword_rag.documents.chunker import chunk_text

        if max_tokens is not None:
            tokens = estimate_token_count(content)
            if tokens > max_tokens:
                raise DocumentError(
                    f"Document '{name}' is too large: ~{tokens} tokens (limit {max_tokens})",
                    code=ErrorCode.DOCUMENT_TOO_LARGE,
                    details={"name": name, "tokens": tokens, "max_tokens": max_tokens},
                )

        doc_id = document_id or generate_document_id()
        return cls(
            id=doc_id,
            name=name,
            kind=kind,
            url=url,
            content=content,
            chunks=chunk_text(content, doc_id, name, options),
            metadata=metadata or {},
        )


def generate_document_id() -> str:
    """Generate a document id of the form ``doc-<epoch ms>-<9 base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"doc-{int(time.time() * 1000)}-{suffix}"
