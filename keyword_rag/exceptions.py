"""Exception hierarchy for keyword-rag.

Every custom exception derives from KeywordRAGError and carries a
structured error code that the API layer maps to an HTTP status.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "RAG-1000"
    CONFIGURATION_ERROR = "RAG-1001"
    VALIDATION_ERROR = "RAG-1002"

    # Document errors (2xxx)
    DOCUMENT_NOT_FOUND = "RAG-2000"
    DOCUMENT_PARSE_ERROR = "RAG-2001"
    CHUNK_ERROR = "RAG-2002"
    DOCUMENT_TOO_LARGE = "RAG-2003"
    FETCH_ERROR = "RAG-2004"
    EMPTY_CONTENT = "RAG-2005"

    # LLM errors (5xxx)
    LLM_SERVICE_ERROR = "RAG-5000"
    LLM_TIMEOUT = "RAG-5001"
    LLM_RATE_LIMIT = "RAG-5002"

    # Retrieval errors (6xxx)
    RETRIEVAL_ERROR = "RAG-6000"
    NO_RESULTS_FOUND = "RAG-6001"


class KeywordRAGError(Exception):
    """Base exception for all keyword-rag errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(KeywordRAGError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class DocumentError(KeywordRAGError):
    """Document loading or registration error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DOCUMENT_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class ChunkingError(DocumentError):
    """Chunking parameters cannot make progress through the text."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CHUNK_ERROR, details)


class FetchError(DocumentError):
    """Remote content could not be fetched or yielded no text."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.FETCH_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class LLMError(KeywordRAGError):
    """LLM service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class RetrievalError(KeywordRAGError):
    """Retrieval operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RETRIEVAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
