"""In-memory document collection used for retrieval."""

from pathlib import Path
from typing import Any

from keyword_rag.config import Settings, get_settings
from keyword_rag.documents.chunker import ChunkingOptions
from keyword_rag.documents.fetcher import UrlFetcher
from keyword_rag.documents.loader import TextFileLoader
from keyword_rag.documents.models import Document, SourceKind
from keyword_rag.exceptions import DocumentError, ErrorCode
from keyword_rag.logging_config import get_logger
from keyword_rag.observability.metrics import track_document_ingested, track_knowledge_base_size
from keyword_rag.retrieval.models import RetrievalResult
from keyword_rag.retrieval.retriever import KeywordRetriever, Retriever

logger = get_logger(__name__)


class KnowledgeBase:
    """Documents keyed by id, searchable with a retriever.

    Adding a document with an existing id replaces it. Nothing is
    persisted; the collection lives as long as the instance.
    """

    def __init__(
        self,
        options: ChunkingOptions | None = None,
        max_tokens: int | None = None,
        retriever: Retriever | None = None,
        fetcher: UrlFetcher | None = None,
    ) -> None:
        """Initialize an empty knowledge base.

        Args:
            options: Chunking options for added text.
            max_tokens: Estimated token budget per document.
            retriever: Retriever used by ``retrieve``.
            fetcher: URL fetcher used by ``add_url``.
        """
        self.options = options or ChunkingOptions()
        self.max_tokens = max_tokens
        self.retriever = retriever or KeywordRetriever()
        self._fetcher = fetcher
        self._documents: dict[str, Document] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "KnowledgeBase":
        """Build a knowledge base configured from application settings."""
        settings = settings or get_settings()
        options = settings.chunking.to_options()
        max_tokens = settings.retrieval.max_document_tokens
        return cls(
            options=options,
            max_tokens=max_tokens,
            retriever=KeywordRetriever(top_k=settings.retrieval.top_k),
            fetcher=UrlFetcher(settings=settings.fetch, options=options, max_tokens=max_tokens),
        )

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    @property
    def documents(self) -> list[Document]:
        """Documents in insertion order."""
        return list(self._documents.values())

    def add_document(self, document: Document) -> Document:
        """Register an already-chunked document."""
        replaced = document.id in self._documents
        self._documents[document.id] = document
        track_document_ingested(document.kind.value, len(document.chunks), len(self))
        logger.info(
            "Replaced document" if replaced else "Added document",
            extra={
                "document_id": document.id,
                "document_name": document.name,
                "kind": document.kind.value,
                "chunks": len(document.chunks),
            },
        )
        return document

    def add_text(
        self,
        content: str,
        name: str,
        kind: SourceKind = SourceKind.TEXT,
        document_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Document:
        """Chunk plain text and register it.

        Raises:
            DocumentError: If the text is over the token budget.
        """
        document = Document.from_text(
            content,
            name=name,
            kind=kind,
            document_id=document_id,
            options=self.options,
            max_tokens=self.max_tokens,
            metadata=metadata,
        )
        return self.add_document(document)

    def add_file(self, path: str | Path) -> Document:
        """Load, chunk and register a local text file.

        Raises:
            DocumentError: If the file cannot be loaded.
        """
        loader = TextFileLoader(options=self.options, max_tokens=self.max_tokens)
        return self.add_document(loader.load(path))

    async def add_url(self, url: str, name: str | None = None) -> Document:
        """Fetch, chunk and register a web page.

        Raises:
            FetchError: If the page cannot be fetched or has no text.
        """
        if self._fetcher is None:
            self._fetcher = UrlFetcher(options=self.options, max_tokens=self.max_tokens)
        return self.add_document(await self._fetcher.load(url, name=name))

    def get(self, document_id: str) -> Document:
        """Look up a document.

        Raises:
            DocumentError: If no document has this id.
        """
        try:
            return self._documents[document_id]
        except KeyError:
            raise DocumentError(
                f"Document not found: {document_id}",
                code=ErrorCode.DOCUMENT_NOT_FOUND,
                details={"document_id": document_id},
            ) from None

    def remove(self, document_id: str) -> Document:
        """Remove and return a document.

        Raises:
            DocumentError: If no document has this id.
        """
        document = self.get(document_id)
        del self._documents[document_id]
        track_knowledge_base_size(len(self))
        logger.info("Removed document", extra={"document_id": document_id})
        return document

    def clear(self) -> None:
        """Remove every document."""
        self._documents.clear()
        track_knowledge_base_size(0)

    def retrieve(self, query: str, top_k: int | None = None) -> RetrievalResult:
        """Rank chunks of all documents against a query."""
        return self.retriever.retrieve(query, self.documents, top_k)

    async def close(self) -> None:
        """Release the URL fetcher's HTTP client, if one was created."""
        if self._fetcher is not None:
            await self._fetcher.close()
