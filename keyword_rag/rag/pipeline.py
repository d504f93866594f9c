"""Retrieve-then-generate question answering."""

from keyword_rag.llm.client import LLMClient
from keyword_rag.llm.prompts import ChatPromptBuilder
from keyword_rag.logging_config import get_logger
from keyword_rag.rag.knowledge_base import KnowledgeBase
from keyword_rag.rag.models import RAGAnswer, RAGQuery, SourceAttribution
from keyword_rag.retrieval.context import NO_CONTEXT_ANSWER

logger = get_logger(__name__)


class RAGPipeline:
    """Answer questions from a knowledge base.

    With ``require_context`` set, a question that retrieves nothing is
    answered with ``NO_CONTEXT_ANSWER`` and the model is not called.
    Otherwise the model is asked without grounding.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        llm_client: LLMClient,
        prompt_builder: ChatPromptBuilder | None = None,
        require_context: bool = True,
    ) -> None:
        self._knowledge_base = knowledge_base
        self._llm_client = llm_client
        self._prompt_builder = prompt_builder or ChatPromptBuilder()
        self.require_context = require_context

    async def ask(self, request: RAGQuery) -> RAGAnswer:
        """Retrieve context for a question and generate an answer.

        Raises:
            LLMError: If the generation call fails.
        """
        retrieval = self._knowledge_base.retrieve(request.question, request.top_k)
        grounded = bool(retrieval.chunks)

        logger.info(
            "Answering question",
            extra={
                "question_length": len(request.question),
                "chunks": len(retrieval),
                "top_score": retrieval.top_score,
            },
        )

        if not grounded and self.require_context:
            return RAGAnswer(answer=NO_CONTEXT_ANSWER, grounded=False)

        messages = self._prompt_builder.build(request.question, retrieval, request.history)
        result = await self._llm_client.complete(messages)

        return RAGAnswer(
            answer=result.content,
            sources=[
                SourceAttribution.from_chunk(chunk, score)
                for chunk, score in zip(retrieval.chunks, retrieval.scores, strict=True)
            ],
            grounded=grounded,
            model=result.model,
            tokens_used=result.total_tokens,
        )

    async def ask_simple(self, question: str, top_k: int | None = None) -> str:
        """Answer a standalone question and return only the text."""
        answer = await self.ask(RAGQuery(question=question, top_k=top_k))
        return answer.answer
