"""Chat message and completion models."""

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One turn of a conversation."""

    role: Role = Field(description="Message role")
    content: str = Field(description="Message content")

    def to_payload(self) -> dict[str, str]:
        """Wire representation for chat completion requests."""
        return {"role": self.role.value, "content": self.content}


class GenerationResult(BaseModel):
    """Result of a chat completion.

    Attributes:
        content: The generated text.
        model: Model that produced it.
        prompt_tokens: Tokens in the prompt.
        completion_tokens: Tokens in the completion.
    """

    content: str = Field(description="Generated text")
    model: str = Field(description="Model used")
    prompt_tokens: int = Field(default=0, description="Prompt token count")
    completion_tokens: int = Field(default=0, description="Completion token count")

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens
