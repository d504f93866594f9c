"""Request-scoped access to application services."""

from fastapi import HTTPException, Request, status

from keyword_rag.rag.knowledge_base import KnowledgeBase
from keyword_rag.rag.pipeline import RAGPipeline


def get_knowledge_base(request: Request) -> KnowledgeBase:
    """Knowledge base attached to the running app."""
    return request.app.state.knowledge_base


def get_pipeline(request: Request) -> RAGPipeline:
    """Question answering pipeline, or 503 when no LLM is configured."""
    pipeline: RAGPipeline | None = request.app.state.pipeline
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "LLM not configured",
                "message": "Set LLM_API_KEY (or LLM_BASE_URL for a local server) to enable /query",
            },
        )
    return pipeline
