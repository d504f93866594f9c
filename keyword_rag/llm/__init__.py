"""Chat completion client and prompt assembly."""

from keyword_rag.llm.client import LLMClient, OpenAICompatibleClient
from keyword_rag.llm.models import GenerationResult, Message, Role
from keyword_rag.llm.prompts import ChatPromptBuilder

__all__ = [
    "ChatPromptBuilder",
    "GenerationResult",
    "LLMClient",
    "Message",
    "OpenAICompatibleClient",
    "Role",
]
