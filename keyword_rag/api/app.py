"""FastAPI application entry point.

Wires the knowledge base, the optional LLM pipeline, error handling,
metrics and health checks.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from keyword_rag import __version__
from keyword_rag.api.routes import router
from keyword_rag.config import LLMSettings, Settings, get_settings
from keyword_rag.exceptions import ErrorCode, KeywordRAGError
from keyword_rag.llm.client import LLMClient, OpenAICompatibleClient
from keyword_rag.logging_config import get_logger, setup_logging
from keyword_rag.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)
from keyword_rag.rag.knowledge_base import KnowledgeBase
from keyword_rag.rag.pipeline import RAGPipeline

logger = get_logger(__name__)

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.DOCUMENT_NOT_FOUND: 404,
    ErrorCode.NO_RESULTS_FOUND: 404,
    ErrorCode.DOCUMENT_TOO_LARGE: 413,
    ErrorCode.CHUNK_ERROR: 422,
    ErrorCode.EMPTY_CONTENT: 422,
    ErrorCode.LLM_RATE_LIMIT: 429,
    ErrorCode.FETCH_ERROR: 502,
    ErrorCode.LLM_SERVICE_ERROR: 502,
    ErrorCode.LLM_TIMEOUT: 504,
}

OPENAI_BASE_URL = "https://api.openai.com/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup and release HTTP clients on shutdown."""
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting keyword-rag",
        extra={"version": __version__, "environment": settings.environment.value},
    )

    yield

    await app.state.knowledge_base.close()
    if isinstance(app.state.llm_client, OpenAICompatibleClient):
        await app.state.llm_client.close()
    logger.info("Shutting down keyword-rag")


def llm_configured(settings: LLMSettings) -> bool:
    """True when an API key is set or a non-OpenAI endpoint is configured."""
    return bool(settings.api_key.get_secret_value()) or (
        settings.base_url.rstrip("/") != OPENAI_BASE_URL
    )


def create_app(
    settings: Settings | None = None,
    knowledge_base: KnowledgeBase | None = None,
    llm_client: LLMClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings (cached settings when omitted).
        knowledge_base: Knowledge base to serve (built from settings when omitted).
        llm_client: Generation client; when omitted one is created only if
            the LLM settings are usable, otherwise /query answers 503.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="keyword-rag",
        description="Keyword-scored retrieval-augmented generation over an in-memory knowledge base",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    if llm_client is None and llm_configured(settings.llm):
        llm_client = OpenAICompatibleClient(settings=settings.llm)

    if knowledge_base is None:
        knowledge_base = KnowledgeBase.from_settings(settings)

    app.state.knowledge_base = knowledge_base
    app.state.llm_client = llm_client
    app.state.pipeline = (
        RAGPipeline(app.state.knowledge_base, llm_client) if llm_client is not None else None
    )

    app.add_middleware(MetricsMiddleware)
    app.add_exception_handler(KeywordRAGError, keyword_rag_exception_handler)

    app.include_router(router)
    app.add_api_route("/metrics", metrics, methods=["GET"], tags=["Observability"])
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])

    return app


async def keyword_rag_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render KeywordRAGError as a structured JSON error."""
    if not isinstance(exc, KeywordRAGError):
        return JSONResponse(
            status_code=500,
            content={
                "error": {"code": ErrorCode.INTERNAL_ERROR.value, "message": str(exc), "details": {}}
            },
        )

    status_code = STATUS_BY_CODE.get(exc.code, 500)
    logger.log(
        logging.ERROR if status_code >= 500 else logging.WARNING,
        "Request failed: %s",
        exc.message,
        extra={"error_code": exc.code.value, "path": request.url.path, "details": exc.details},
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def metrics() -> Response:
    """Prometheus exposition endpoint."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


async def health_check() -> dict[str, Any]:
    """Basic health check with version and timestamp."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(request: Request) -> dict[str, Any]:
    """Readiness probe listing component availability."""
    checks = {
        "config": "ok",
        "knowledge_base": "ok",
        "llm": "ok" if request.app.state.pipeline is not None else "disabled",
    }
    return {
        "status": "ready",
        "checks": checks,
        "documents": len(request.app.state.knowledge_base),
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def liveness_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "alive"}


app = create_app()
