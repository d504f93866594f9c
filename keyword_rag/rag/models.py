"""Question answering data models."""

from pydantic import BaseModel, Field

from keyword_rag.documents.models import Chunk
from keyword_rag.llm.models import Message

SNIPPET_LENGTH = 200


class SourceAttribution(BaseModel):
    """A retrieved chunk cited by an answer.

    Attributes:
        document_id: Source document identifier.
        document_name: Source document display name.
        chunk_id: Cited chunk identifier.
        content: Chunk text, shortened to a snippet.
        score: Keyword relevance score.
    """

    document_id: str = Field(description="Source document identifier")
    document_name: str = Field(description="Source document name")
    chunk_id: str = Field(description="Cited chunk identifier")
    content: str = Field(description="Relevant content snippet")
    score: float = Field(description="Relevance score")

    @classmethod
    def from_chunk(cls, chunk: Chunk, score: float) -> "SourceAttribution":
        content = chunk.content
        if len(content) > SNIPPET_LENGTH:
            content = content[:SNIPPET_LENGTH] + "..."
        return cls(
            document_id=chunk.document_id,
            document_name=chunk.document_name,
            chunk_id=chunk.id,
            content=content,
            score=score,
        )


class RAGQuery(BaseModel):
    """A question for the knowledge base.

    Attributes:
        question: The user's question.
        top_k: Chunks to retrieve; knowledge base default when None.
        history: Earlier conversation turns.
    """

    question: str = Field(min_length=1, description="User question")
    top_k: int | None = Field(default=None, ge=1, le=20, description="Chunks to retrieve")
    history: list[Message] = Field(default_factory=list, description="Earlier turns")


class RAGAnswer(BaseModel):
    """Answer to a RAGQuery.

    Attributes:
        answer: Generated (or fallback) answer text.
        sources: Chunks the answer was grounded on.
        grounded: Whether any context was supplied to the model.
        model: LLM model used; empty when the model was not called.
        tokens_used: Total tokens consumed.
    """

    answer: str = Field(description="Answer text")
    sources: list[SourceAttribution] = Field(
        default_factory=list,
        description="Source attributions",
    )
    grounded: bool = Field(description="Whether context was supplied")
    model: str = Field(default="", description="LLM model used")
    tokens_used: int = Field(default=0, description="Total tokens consumed")
