"""Retriever interface and keyword implementation."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from keyword_rag.documents.models import Chunk, Document
from keyword_rag.exceptions import ErrorCode, RetrievalError
from keyword_rag.logging_config import get_logger
from keyword_rag.observability.metrics import track_retrieval_request
from keyword_rag.retrieval.context import render_chunks
from keyword_rag.retrieval.models import RetrievalResult
from keyword_rag.retrieval.scorer import inverse_document_frequencies, query_terms, score_terms

logger = get_logger(__name__)

DEFAULT_TOP_K = 3


def retrieve(
    query: str,
    documents: Iterable[Document],
    top_k: int = DEFAULT_TOP_K,
) -> RetrievalResult:
    """Rank every chunk of ``documents`` against ``query`` and keep the best.

    Chunks from all documents compete in one pool. Sorting is stable, so
    equal scores keep the order in which chunks were encountered.

    Args:
        query: Free-text query.
        documents: Documents whose chunks are candidates.
        top_k: Maximum number of chunks to return.

    Returns:
        RetrievalResult with at most ``top_k`` chunks, their scores and the
        rendered context. Empty when there are no candidate chunks.

    Raises:
        RetrievalError: If ``top_k`` is negative.
    """
    if top_k < 0:
        raise RetrievalError(
            f"top_k must not be negative, got {top_k}",
            code=ErrorCode.VALIDATION_ERROR,
            details={"top_k": top_k},
        )

    candidates: list[Chunk] = [chunk for document in documents for chunk in document.chunks]
    if not candidates:
        return RetrievalResult.empty()

    terms = query_terms(query)
    idf = inverse_document_frequencies(terms, [chunk.content.lower() for chunk in candidates])
    scored = [(chunk, score_terms(terms, chunk.content, idf)) for chunk in candidates]
    ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)[:top_k]

    chunks = [chunk for chunk, _ in ranked]
    return RetrievalResult(
        chunks=chunks,
        scores=[value for _, value in ranked],
        context=render_chunks(chunks),
    )


class Retriever(ABC):
    """Abstract base class for retrievers."""

    @abstractmethod
    def retrieve(
        self,
        query: str,
        documents: Iterable[Document],
        top_k: int | None = None,
    ) -> RetrievalResult:
        """Retrieve the chunks most relevant to a query.

        Args:
            query: The search query.
            documents: Documents to search.
            top_k: Maximum number of chunks; implementation default if None.

        Returns:
            Ranked retrieval result.
        """
        ...


class KeywordRetriever(Retriever):
    """Keyword TF-IDF retriever with a configurable default ``top_k``.

    Holds no state between calls beyond its configuration.
    """

    def __init__(self, top_k: int = DEFAULT_TOP_K) -> None:
        self.top_k = top_k

    def retrieve(
        self,
        query: str,
        documents: Iterable[Document],
        top_k: int | None = None,
    ) -> RetrievalResult:
        limit = self.top_k if top_k is None else top_k
        result = retrieve(query, documents, limit)

        track_retrieval_request(chunks_returned=len(result), top_score=result.top_score)
        logger.debug(
            "Retrieved %d chunks",
            len(result),
            extra={"query_length": len(query), "top_k": limit, "top_score": result.top_score},
        )
        return result
