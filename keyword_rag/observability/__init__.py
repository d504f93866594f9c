"""Prometheus instrumentation."""

from keyword_rag.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    track_document_ingested,
    track_fetch,
    track_knowledge_base_size,
    track_llm_request,
    track_retrieval_request,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "track_document_ingested",
    "track_fetch",
    "track_knowledge_base_size",
    "track_llm_request",
    "track_retrieval_request",
]
