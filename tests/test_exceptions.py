"""Tests for application exceptions."""

from keyword_rag.exceptions import (
    ChunkingError,
    ConfigurationError,
    DocumentError,
    ErrorCode,
    FetchError,
    KeywordRAGError,
    LLMError,
    RetrievalError,
)


class TestErrorCode:
    """Tests for error codes."""

    def test_error_code_format(self) -> None:
        """Error codes follow RAG-XXXX format."""
        for code in ErrorCode:
            assert code.value.startswith("RAG-")
            assert len(code.value) == 8  # RAG-XXXX

    def test_error_code_uniqueness(self) -> None:
        """All error codes are unique."""
        codes = [code.value for code in ErrorCode]
        assert len(codes) == len(set(codes))


class TestKeywordRAGError:
    """Tests for base exception."""

    def test_basic_exception(self) -> None:
        """Base exception stores message and code."""
        error = KeywordRAGError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}

    def test_exception_with_details(self) -> None:
        """Exception can have additional details."""
        error = KeywordRAGError(
            "Validation failed",
            code=ErrorCode.VALIDATION_ERROR,
            details={"field": "query", "reason": "too short"},
        )
        assert error.details == {"field": "query", "reason": "too short"}

    def test_to_dict(self) -> None:
        """Exception converts to API response dict."""
        error = KeywordRAGError(
            "Something went wrong",
            code=ErrorCode.INTERNAL_ERROR,
            details={"trace_id": "abc123"},
        )

        assert error.to_dict() == {
            "error": {
                "code": "RAG-1000",
                "message": "Something went wrong",
                "details": {"trace_id": "abc123"},
            }
        }

    def test_str_representation(self) -> None:
        """Exception string is the message."""
        assert str(KeywordRAGError("Test error")) == "Test error"


class TestSubclasses:
    """Tests for specialized exceptions."""

    def test_configuration_error(self) -> None:
        """ConfigurationError has correct default code."""
        error = ConfigurationError("Missing env var")
        assert error.code == ErrorCode.CONFIGURATION_ERROR
        assert isinstance(error, KeywordRAGError)

    def test_document_error(self) -> None:
        """DocumentError defaults to not found and accepts other codes."""
        assert DocumentError("Document not found").code == ErrorCode.DOCUMENT_NOT_FOUND
        error = DocumentError("Too big", code=ErrorCode.DOCUMENT_TOO_LARGE)
        assert error.code == ErrorCode.DOCUMENT_TOO_LARGE

    def test_chunking_error(self) -> None:
        """ChunkingError is a DocumentError with its own code."""
        error = ChunkingError("No progress", details={"step": 0})
        assert error.code == ErrorCode.CHUNK_ERROR
        assert isinstance(error, DocumentError)

    def test_fetch_error(self) -> None:
        """FetchError is a DocumentError."""
        error = FetchError("Unreachable")
        assert error.code == ErrorCode.FETCH_ERROR
        assert isinstance(error, DocumentError)
        assert FetchError("Empty", code=ErrorCode.EMPTY_CONTENT).code == ErrorCode.EMPTY_CONTENT

    def test_llm_error(self) -> None:
        """LLMError defaults to service error and accepts timeout."""
        assert LLMError("Model unavailable").code == ErrorCode.LLM_SERVICE_ERROR
        assert LLMError("Slow", code=ErrorCode.LLM_TIMEOUT).code == ErrorCode.LLM_TIMEOUT

    def test_retrieval_error(self) -> None:
        """RetrievalError has correct default code."""
        assert RetrievalError("Search failed").code == ErrorCode.RETRIEVAL_ERROR
