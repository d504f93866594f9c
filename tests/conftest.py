"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Sequence

import pytest
from httpx import ASGITransport, AsyncClient

from keyword_rag.api.app import create_app
from keyword_rag.config import LLMSettings, Settings
from keyword_rag.documents.chunker import ChunkingOptions
from keyword_rag.llm.client import LLMClient
from keyword_rag.llm.models import GenerationResult, Message
from keyword_rag.rag.knowledge_base import KnowledgeBase

SAMPLE_TEXT = (
    "Refunds are issued within fourteen days of purchase.\n\n"
    "Shipping is free for orders above fifty dollars."
)


class StubLLMClient(LLMClient):
    """LLM client that records requests and returns a fixed answer."""

    def __init__(self, answer: str = "Stub answer") -> None:
        self.answer = answer
        self.calls: list[list[Message]] = []

    @property
    def model_name(self) -> str:
        return "stub-model"

    async def complete(
        self,
        messages: Sequence[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> GenerationResult:
        self.calls.append(list(messages))
        return GenerationResult(
            content=self.answer,
            model=self.model_name,
            prompt_tokens=10,
            completion_tokens=5,
        )


def offline_settings() -> Settings:
    """Settings with no usable LLM endpoint."""
    return Settings(llm=LLMSettings(base_url="https://api.openai.com/v1", api_key=""))


@pytest.fixture
def knowledge_base() -> KnowledgeBase:
    """Empty knowledge base with small chunks."""
    return KnowledgeBase(options=ChunkingOptions(chunk_size=50, overlap=5))


@pytest.fixture
def stub_llm() -> StubLLMClient:
    """Recording LLM client."""
    return StubLLMClient()


@pytest.fixture
async def client(knowledge_base: KnowledgeBase) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for an app without an LLM.

    Yields:
        AsyncClient configured for testing.
    """
    app = create_app(settings=offline_settings(), knowledge_base=knowledge_base)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def llm_client(
    knowledge_base: KnowledgeBase,
    stub_llm: StubLLMClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for an app answering with the stub LLM.

    Yields:
        AsyncClient configured for testing.
    """
    app = create_app(
        settings=offline_settings(),
        knowledge_base=knowledge_base,
        llm_client=stub_llm,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
