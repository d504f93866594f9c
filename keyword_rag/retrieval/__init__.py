"""Keyword retrieval: scoring, ranking and context rendering."""

from keyword_rag.retrieval.context import (
    NO_CONTEXT_ANSWER,
    build_context,
    build_prompt_prefix,
    format_chunk,
)
from keyword_rag.retrieval.models import RetrievalResult
from keyword_rag.retrieval.retriever import KeywordRetriever, Retriever, retrieve
from keyword_rag.retrieval.scorer import (
    inverse_document_frequencies,
    query_terms,
    score,
    score_terms,
    tokenize,
)

__all__ = [
    "NO_CONTEXT_ANSWER",
    "KeywordRetriever",
    "RetrievalResult",
    "Retriever",
    "build_context",
    "build_prompt_prefix",
    "format_chunk",
    "inverse_document_frequencies",
    "query_terms",
    "retrieve",
    "score",
    "score_terms",
    "tokenize",
]
