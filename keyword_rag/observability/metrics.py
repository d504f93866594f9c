"""Prometheus metrics.

Covers HTTP traffic, document ingestion, keyword retrieval and LLM calls.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Ingestion
DOCUMENTS_INGESTED_TOTAL = Counter(
    "documents_ingested_total",
    "Documents added to the knowledge base",
    ["kind"],
)

CHUNKS_PER_DOCUMENT = Histogram(
    "chunks_per_document",
    "Chunks produced per ingested document",
    buckets=[0, 1, 2, 5, 10, 25, 50, 100, 250, 500],
)

KNOWLEDGE_BASE_DOCUMENTS = Gauge(
    "knowledge_base_documents",
    "Documents currently held in the knowledge base",
)

URL_FETCH_TOTAL = Counter(
    "url_fetch_total",
    "URL fetch attempts by outcome",
    ["status", "route"],  # route: direct or proxy
)

# Retrieval
RETRIEVAL_CHUNKS_RETURNED = Histogram(
    "retrieval_chunks_returned",
    "Number of chunks returned per retrieval",
    buckets=[0, 1, 2, 3, 5, 10, 20, 50],
)

RETRIEVAL_TOP_SCORE = Histogram(
    "retrieval_top_score",
    "Top keyword score per query",
    buckets=[0.25, 0.5, 1.0, 1.5, 2.0, 3.0, 5.0, 10.0],
)

# LLM
LLM_REQUEST_DURATION = Histogram(
    "llm_request_duration_seconds",
    "LLM request duration in seconds",
    ["model", "status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

LLM_REQUEST_TOTAL = Counter(
    "llm_requests_total",
    "Total LLM requests",
    ["model", "status"],
)

LLM_TOKENS_TOTAL = Counter(
    "llm_tokens_total",
    "Total LLM tokens used",
    ["model", "type"],  # type: prompt or completion
)


API_SECTIONS = frozenset({"documents", "retrieve", "query"})
KNOWN_PATHS = frozenset({"/metrics", "/docs", "/redoc", "/openapi.json"})
OTHER_ENDPOINT = "other"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record duration and count of every HTTP request except /metrics."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        labels = {
            "method": request.method,
            "endpoint": normalize_endpoint(request.url.path),
            "status_code": response.status_code,
        }
        HTTP_REQUEST_DURATION.labels(**labels).observe(duration)
        HTTP_REQUEST_TOTAL.labels(**labels).inc()

        return response


def normalize_endpoint(path: str) -> str:
    """Collapse paths into a bounded set of route families.

    Ids are dropped from API paths, and paths outside the known routes all
    share the "other" label.
    """
    if path.startswith("/health"):
        return "/health"
    if path.startswith("/api/v1/"):
        section = path.split("/")[3]
        if section in API_SECTIONS:
            return f"/api/v1/{section}"
    if path in KNOWN_PATHS:
        return path
    return OTHER_ENDPOINT


def get_metrics() -> bytes:
    """Generate Prometheus exposition output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Content type of the exposition output."""
    return CONTENT_TYPE_LATEST


def track_document_ingested(kind: str, chunk_count: int, total_documents: int) -> None:
    """Record a document added to the knowledge base.

    Args:
        kind: Source kind value (pdf, url, text).
        chunk_count: Chunks produced for the document.
        total_documents: Knowledge base size after the addition.
    """
    DOCUMENTS_INGESTED_TOTAL.labels(kind=kind).inc()
    CHUNKS_PER_DOCUMENT.observe(chunk_count)
    KNOWLEDGE_BASE_DOCUMENTS.set(total_documents)


def track_knowledge_base_size(total_documents: int) -> None:
    """Update the knowledge base size gauge."""
    KNOWLEDGE_BASE_DOCUMENTS.set(total_documents)


def track_fetch(success: bool, via_proxy: bool) -> None:
    """Record the outcome of a URL fetch."""
    URL_FETCH_TOTAL.labels(
        status="success" if success else "error",
        route="proxy" if via_proxy else "direct",
    ).inc()


def track_retrieval_request(chunks_returned: int, top_score: float) -> None:
    """Record retrieval size and best score.

    Args:
        chunks_returned: Number of chunks returned.
        top_score: Highest keyword score (only positive scores are observed).
    """
    RETRIEVAL_CHUNKS_RETURNED.observe(chunks_returned)
    if top_score > 0:
        RETRIEVAL_TOP_SCORE.observe(top_score)


def track_llm_request(
    model: str,
    duration: float,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool = True,
) -> None:
    """Record an LLM call.

    Args:
        model: LLM model name.
        duration: Request duration in seconds.
        prompt_tokens: Number of prompt tokens.
        completion_tokens: Number of completion tokens.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    LLM_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    LLM_REQUEST_TOTAL.labels(model=model, status=status).inc()

    if success:
        LLM_TOKENS_TOTAL.labels(model=model, type="prompt").inc(prompt_tokens)
        LLM_TOKENS_TOTAL.labels(model=model, type="completion").inc(completion_tokens)
