"""Document loaders for local files."""

from abc import ABC, abstractmethod
from pathlib import Path

from keyword_rag.documents.chunker import ChunkingOptions
from keyword_rag.documents.html_text import html_to_text
from keyword_rag.documents.models import Document, SourceKind
from keyword_rag.exceptions import DocumentError, ErrorCode
from keyword_rag.logging_config import get_logger

logger = get_logger(__name__)


class DocumentLoader(ABC):
    """Abstract base class for document loaders.

    Loaders turn a source into an already-chunked Document.
    """

    def __init__(
        self,
        options: ChunkingOptions | None = None,
        max_tokens: int | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            options: Chunking options applied to loaded text.
            max_tokens: Estimated token budget per document.
        """
        self.options = options
        self.max_tokens = max_tokens

    @abstractmethod
    def load(self, source: str | Path) -> Document:
        """Load a document from a source.

        Raises:
            DocumentError: If loading fails.
        """
        ...

    @abstractmethod
    def supports(self, source: str | Path) -> bool:
        """Check if this loader can handle the given source."""
        ...


class TextFileLoader(DocumentLoader):
    """Loader for text-based files.

    HTML files are reduced to their visible text; everything else is read
    as-is.
    """

    SUPPORTED_EXTENSIONS = {
        ".txt",
        ".text",
        ".md",
        ".markdown",
        ".rst",
        ".csv",
        ".json",
        ".html",
        ".htm",
    }
    HTML_EXTENSIONS = {".html", ".htm"}

    def __init__(
        self,
        options: ChunkingOptions | None = None,
        max_tokens: int | None = None,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(options, max_tokens)
        self.encoding = encoding

    def load(self, source: str | Path) -> Document:
        """Read and chunk a text file.

        Args:
            source: Path to the file.

        Returns:
            Chunked Document named after the file.

        Raises:
            DocumentError: If the file is missing, not a regular file,
                cannot be decoded, or is over the token budget.
        """
        path = Path(source)

        if not path.exists():
            raise DocumentError(
                f"File not found: {path}",
                code=ErrorCode.DOCUMENT_NOT_FOUND,
                details={"path": str(path)},
            )

        if not path.is_file():
            raise DocumentError(
                f"Not a file: {path}",
                code=ErrorCode.DOCUMENT_PARSE_ERROR,
                details={"path": str(path)},
            )

        try:
            content = path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as e:
            raise DocumentError(
                f"Failed to decode file: {path}",
                code=ErrorCode.DOCUMENT_PARSE_ERROR,
                details={"path": str(path), "encoding": self.encoding, "error": str(e)},
            ) from e
        except OSError as e:
            raise DocumentError(
                f"Failed to read file: {path}",
                code=ErrorCode.DOCUMENT_PARSE_ERROR,
                details={"path": str(path), "error": str(e)},
            ) from e

        if path.suffix.lower() in self.HTML_EXTENSIONS:
            content = html_to_text(content)

        document = Document.from_text(
            content,
            name=path.name,
            kind=SourceKind.TEXT,
            options=self.options,
            max_tokens=self.max_tokens,
            metadata={"path": str(path), "file_size": path.stat().st_size},
        )
        logger.info(
            "Loaded file",
            extra={"path": str(path), "document_id": document.id, "chunks": len(document.chunks)},
        )
        return document

    def supports(self, source: str | Path) -> bool:
        """Check if source has a supported text extension."""
        return Path(source).suffix.lower() in self.SUPPORTED_EXTENSIONS
