"""Application configuration using Pydantic Settings.

Every value can be overridden through environment variables (or a .env
file). Section classes use their own prefix, e.g. CHUNKING_CHUNK_SIZE.
"""

from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from keyword_rag.exceptions import ConfigurationError

if TYPE_CHECKING:
    from keyword_rag.documents.chunker import ChunkingOptions


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class ChunkingSettings(BaseSettings):
    """Default chunking parameters for ingested documents."""

    model_config = SettingsConfigDict(env_prefix="CHUNKING_")

    chunk_size: int = Field(default=500, ge=1, description="Words per chunk")
    overlap: int = Field(
        default=50,
        ge=0,
        description="Words carried over into the next chunk",
    )
    preserve_paragraphs: bool = Field(
        default=True,
        description="Align chunk boundaries with blank-line paragraphs",
    )

    def to_options(self) -> "ChunkingOptions":
        """Build chunker options from these settings.

        Raises:
            ConfigurationError: If overlap is not below chunk_size.
        """
        from keyword_rag.documents.chunker import ChunkingOptions

        try:
            return ChunkingOptions(
                chunk_size=self.chunk_size,
                overlap=self.overlap,
                preserve_paragraphs=self.preserve_paragraphs,
            )
        except ValueError as e:
            raise ConfigurationError(
                "Invalid chunking settings",
                details={"chunk_size": self.chunk_size, "overlap": self.overlap, "error": str(e)},
            ) from e


class RetrievalSettings(BaseSettings):
    """Retrieval configuration."""

    model_config = SettingsConfigDict(env_prefix="RETRIEVAL_")

    top_k: int = Field(default=3, ge=1, description="Chunks returned per query")
    max_document_tokens: int = Field(
        default=100_000,
        ge=1,
        description="Estimated token budget for a single document",
    )


class FetchSettings(BaseSettings):
    """URL ingestion configuration."""

    model_config = SettingsConfigDict(env_prefix="FETCH_")

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    proxy_url: str = Field(
        default="https://api.allorigins.win/raw?url={url}",
        description="Fallback proxy template; empty string disables it",
    )
    user_agent: str = Field(
        default="keyword-rag/0.1",
        description="User-Agent header sent with fetches",
    )


class LLMSettings(BaseSettings):
    """Chat completion service configuration.

    Any OpenAI-compatible endpoint works (OpenAI, Ollama, vLLM).
    """

    model_config = SettingsConfigDict(env_prefix="LLM_")

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Chat completions API base URL",
    )
    model: str = Field(default="gpt-4o-mini", description="Model name")
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token; empty means no Authorization header",
    )
    timeout: float = Field(default=60.0, description="Request timeout in seconds")
    max_tokens: int = Field(default=1024, description="Maximum tokens in response")
    temperature: float = Field(default=0.7, description="Sampling temperature")


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Enable debug mode")

    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
