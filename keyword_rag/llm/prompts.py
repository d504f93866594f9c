"""Prompt assembly for knowledge-base chat."""

from collections.abc import Sequence

from keyword_rag.llm.models import Message, Role
from keyword_rag.retrieval.context import build_prompt_prefix
from keyword_rag.retrieval.models import RetrievalResult


class ChatPromptBuilder:
    """Build the message list for a grounded chat turn.

    The system message is the assistant persona followed by the retrieved
    context and its answer-only-from-context instruction. Prior user and
    assistant turns are replayed unchanged before the new question; system
    turns in the history are dropped.
    """

    DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."

    def __init__(self, system_prompt: str | None = None) -> None:
        self.system_prompt = system_prompt or self.DEFAULT_SYSTEM_PROMPT

    def system_message(self, retrieval: RetrievalResult) -> Message:
        """System turn carrying persona and grounding, if any."""
        prefix = build_prompt_prefix(retrieval)
        content = f"{self.system_prompt}\n\n{prefix}" if prefix else self.system_prompt
        return Message(role=Role.SYSTEM, content=content)

    def build(
        self,
        question: str,
        retrieval: RetrievalResult,
        history: Sequence[Message] = (),
    ) -> list[Message]:
        """Assemble system, history and user messages.

        System messages in ``history`` are dropped; the grounded system
        message always comes first.
        """
        messages = [self.system_message(retrieval)]
        messages.extend(m for m in history if m.role != Role.SYSTEM)
        messages.append(Message(role=Role.USER, content=question))
        return messages
