"""URL ingestion over HTTP."""

from urllib.parse import quote, urlparse

import httpx

from keyword_rag.config import FetchSettings, get_settings
from keyword_rag.documents.chunker import ChunkingOptions
from keyword_rag.documents.html_text import html_to_text
from keyword_rag.documents.models import Document, SourceKind
from keyword_rag.exceptions import ErrorCode, FetchError
from keyword_rag.logging_config import get_logger
from keyword_rag.observability.metrics import track_fetch

logger = get_logger(__name__)

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class UrlFetcher:
    """Fetch web pages and turn them into chunked documents.

    A failed direct request is retried once through the configured proxy
    template, if any. Both failures are reported together when the proxy
    also fails.
    """

    def __init__(
        self,
        settings: FetchSettings | None = None,
        client: httpx.AsyncClient | None = None,
        options: ChunkingOptions | None = None,
        max_tokens: int | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            settings: Fetch configuration.
            client: HTTP client (for testing).
            options: Chunking options for loaded documents.
            max_tokens: Estimated token budget per document.
        """
        self._settings = settings or get_settings().fetch
        self._client = client
        self._owns_client = client is None
        self.options = options
        self.max_tokens = max_tokens

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout,
                follow_redirects=True,
                headers={"User-Agent": self._settings.user_agent},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str) -> str:
        client = await self._get_client()
        response = await client.get(url, headers={"Accept": ACCEPT_HEADER})
        response.raise_for_status()
        return response.text

    def _proxy_url(self, url: str) -> str | None:
        if not self._settings.proxy_url:
            return None
        return self._settings.proxy_url.format(url=quote(url, safe=""))

    async def fetch_html(self, url: str) -> str:
        """Download the raw markup of a page.

        Raises:
            FetchError: If both the direct and the proxied request fail.
        """
        try:
            markup = await self._get(url)
        except httpx.HTTPError as direct_error:
            proxy_url = self._proxy_url(url)
            if proxy_url is None:
                track_fetch(success=False, via_proxy=False)
                raise FetchError(
                    f"Failed to fetch URL {url}: {direct_error}",
                    details={"url": url, "error": str(direct_error)},
                ) from direct_error

            logger.warning(
                "Direct fetch failed, retrying through proxy",
                extra={"url": url, "error": str(direct_error)},
            )
            try:
                markup = await self._get(proxy_url)
            except httpx.HTTPError as proxy_error:
                track_fetch(success=False, via_proxy=True)
                raise FetchError(
                    f"Failed to fetch URL {url}. Direct fetch error: {direct_error}. "
                    f"Proxy fetch error: {proxy_error}.",
                    details={
                        "url": url,
                        "direct_error": str(direct_error),
                        "proxy_error": str(proxy_error),
                    },
                ) from proxy_error
            track_fetch(success=True, via_proxy=True)
            return markup

        track_fetch(success=True, via_proxy=False)
        return markup

    async def fetch_text(self, url: str) -> str:
        """Download a page and extract its visible text.

        Raises:
            FetchError: If the page cannot be fetched or has no text.
        """
        text = html_to_text(await self.fetch_html(url))
        if not text:
            raise FetchError(
                f"No text content could be extracted from {url}",
                code=ErrorCode.EMPTY_CONTENT,
                details={"url": url},
            )
        return text

    async def load(self, url: str, name: str | None = None) -> Document:
        """Fetch a page and return it as a chunked url Document.

        Args:
            url: Page to fetch.
            name: Display name; defaults to the URL host and path.
        """
        text = await self.fetch_text(url)
        document = Document.from_text(
            text,
            name=name or _display_name(url),
            kind=SourceKind.URL,
            url=url,
            options=self.options,
            max_tokens=self.max_tokens,
        )
        logger.info(
            "Loaded URL",
            extra={"url": url, "document_id": document.id, "chunks": len(document.chunks)},
        )
        return document


def _display_name(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.netloc}{parsed.path}".rstrip("/") or url
