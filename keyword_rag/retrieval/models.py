"""Retrieval data models."""

from pydantic import BaseModel, Field, model_validator

from keyword_rag.documents.models import Chunk


class RetrievalResult(BaseModel):
    """Ranked chunks for one query.

    Attributes:
        chunks: Selected chunks, most relevant first.
        scores: Relevance score of each chunk, same order as ``chunks``.
        context: Prompt-ready rendering of ``chunks``.
    """

    chunks: list[Chunk] = Field(default_factory=list, description="Ranked chunks")
    scores: list[float] = Field(default_factory=list, description="Parallel scores")
    context: str = Field(default="", description="Rendered context string")

    @model_validator(mode="after")
    def _check_parallel(self) -> "RetrievalResult":
        if len(self.chunks) != len(self.scores):
            raise ValueError(
                f"chunks and scores differ in length ({len(self.chunks)} != {len(self.scores)})"
            )
        return self

    @classmethod
    def empty(cls) -> "RetrievalResult":
        """A result with no grounding."""
        return cls(chunks=[], scores=[], context="")

    @property
    def top_score(self) -> float:
        """Highest score, or 0.0 when nothing was retrieved."""
        return self.scores[0] if self.scores else 0.0

    def __len__(self) -> int:
        return len(self.chunks)
