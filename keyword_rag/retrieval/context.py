"""Render retrieved chunks into prompt text."""

from collections.abc import Iterable

from keyword_rag.documents.models import Chunk
from keyword_rag.retrieval.models import RetrievalResult

NO_CONTEXT_ANSWER = "I can only answer from the context of knowledge base data."

CHUNK_SEPARATOR = "\n\n"

PROMPT_PREFIX_TEMPLATE = (
    "Context from knowledge base:\n\n"
    "{context}\n\n"
    "IMPORTANT: You must ONLY answer questions based on the context provided above. "
    "If the context does not contain information to answer the question, "
    'respond with: "{fallback}"'
)


def format_chunk(chunk: Chunk) -> str:
    """Label a chunk with the name of its document."""
    return f"[From {chunk.document_name}]:\n{chunk.content}"


def render_chunks(chunks: Iterable[Chunk]) -> str:
    """Join labelled chunks with blank lines, keeping the given order."""
    return CHUNK_SEPARATOR.join(format_chunk(chunk) for chunk in chunks)


def build_context(result: RetrievalResult) -> str:
    """Render a retrieval result as labelled passages in ranked order.

    Returns an empty string when nothing was retrieved.
    """
    return render_chunks(result.chunks)


def build_prompt_prefix(result: RetrievalResult) -> str:
    """Wrap the context in grounding instructions for a generation call.

    The instructions restrict answers to the supplied context and name
    ``NO_CONTEXT_ANSWER`` as the reply when the context is insufficient.
    An empty result yields an empty string; callers choose the fallback.
    """
    if not result.chunks:
        return ""
    return PROMPT_PREFIX_TEMPLATE.format(
        context=build_context(result),
        fallback=NO_CONTEXT_ANSWER,
    )
