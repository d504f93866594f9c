"""Knowledge base API routes."""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from keyword_rag.api.dependencies import get_knowledge_base, get_pipeline
from keyword_rag.documents.models import Document, SourceKind
from keyword_rag.rag.knowledge_base import KnowledgeBase
from keyword_rag.rag.models import RAGAnswer, RAGQuery
from keyword_rag.rag.pipeline import RAGPipeline
from keyword_rag.retrieval.context import build_prompt_prefix
from keyword_rag.retrieval.models import RetrievalResult

router = APIRouter(prefix="/api/v1", tags=["Knowledge base"])

KnowledgeBaseDep = Annotated[KnowledgeBase, Depends(get_knowledge_base)]
PipelineDep = Annotated[RAGPipeline, Depends(get_pipeline)]


class AddTextRequest(BaseModel):
    """Request body for adding a text document."""

    content: str = Field(min_length=1, description="Document text")
    name: str = Field(min_length=1, description="Display name")
    kind: SourceKind = Field(default=SourceKind.TEXT, description="Source kind")
    document_id: str | None = Field(default=None, description="Identifier to use")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Extra fields")


class AddUrlRequest(BaseModel):
    """Request body for adding a web page."""

    url: str = Field(pattern=r"^https?://", description="Page URL")
    name: str | None = Field(default=None, description="Display name")


class DocumentSummary(BaseModel):
    """A document without its text."""

    id: str
    name: str
    kind: SourceKind
    url: str | None = None
    chunk_count: int
    created_at: datetime

    @classmethod
    def from_document(cls, document: Document) -> "DocumentSummary":
        return cls(
            id=document.id,
            name=document.name,
            kind=document.kind,
            url=document.url,
            chunk_count=len(document.chunks),
            created_at=document.created_at,
        )


class RetrieveRequest(BaseModel):
    """Request body for keyword retrieval."""

    query: str = Field(min_length=1, description="Search query")
    top_k: int | None = Field(default=None, ge=0, le=50, description="Chunks to return")


class ChunkHit(BaseModel):
    """A retrieved chunk with its score."""

    chunk_id: str
    document_id: str
    document_name: str
    index: int
    content: str
    score: float


class RetrieveResponse(BaseModel):
    """Ranked chunks plus their prompt renderings."""

    chunks: list[ChunkHit]
    context: str
    prompt_prefix: str

    @classmethod
    def from_result(cls, result: RetrievalResult) -> "RetrieveResponse":
        return cls(
            chunks=[
                ChunkHit(
                    chunk_id=chunk.id,
                    document_id=chunk.document_id,
                    document_name=chunk.document_name,
                    index=chunk.index,
                    content=chunk.content,
                    score=score,
                )
                for chunk, score in zip(result.chunks, result.scores, strict=True)
            ],
            context=result.context,
            prompt_prefix=build_prompt_prefix(result),
        )


@router.post("/documents", response_model=DocumentSummary, status_code=status.HTTP_201_CREATED)
async def add_text_document(request: AddTextRequest, kb: KnowledgeBaseDep) -> DocumentSummary:
    """Chunk and store a text document."""
    document = kb.add_text(
        request.content,
        name=request.name,
        kind=request.kind,
        document_id=request.document_id,
        metadata=request.metadata,
    )
    return DocumentSummary.from_document(document)


@router.post(
    "/documents/url",
    response_model=DocumentSummary,
    status_code=status.HTTP_201_CREATED,
)
async def add_url_document(request: AddUrlRequest, kb: KnowledgeBaseDep) -> DocumentSummary:
    """Fetch, chunk and store a web page."""
    document = await kb.add_url(request.url, name=request.name)
    return DocumentSummary.from_document(document)


@router.get("/documents", response_model=list[DocumentSummary])
async def list_documents(kb: KnowledgeBaseDep) -> list[DocumentSummary]:
    """List stored documents."""
    return [DocumentSummary.from_document(d) for d in kb.documents]


@router.delete("/documents/{document_id}", response_model=DocumentSummary)
async def delete_document(document_id: str, kb: KnowledgeBaseDep) -> DocumentSummary:
    """Remove a document."""
    return DocumentSummary.from_document(kb.remove(document_id))


@router.post("/retrieve", response_model=RetrieveResponse)
def retrieve_chunks(request: RetrieveRequest, kb: KnowledgeBaseDep) -> RetrieveResponse:
    """Rank stored chunks against a query without calling the LLM.

    Declared sync so FastAPI runs the scoring in its threadpool.
    """
    return RetrieveResponse.from_result(kb.retrieve(request.query, request.top_k))


@router.post("/query", response_model=RAGAnswer)
async def query(request: RAGQuery, pipeline: PipelineDep) -> RAGAnswer:
    """Answer a question from the knowledge base."""
    return await pipeline.ask(request)
