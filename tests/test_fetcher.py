"""Tests for URL ingestion."""

import httpx
import pytest

from keyword_rag.config import FetchSettings
from keyword_rag.documents.chunker import ChunkingOptions
from keyword_rag.documents.fetcher import UrlFetcher
from keyword_rag.documents.models import SourceKind
from keyword_rag.exceptions import DocumentError, ErrorCode, FetchError

PAGE = "<html><head><title>Docs</title></head><body><p>Widget setup guide</p></body></html>"
PROXY = "https://proxy.test/raw?url={url}"


def _fetcher(handler, proxy_url: str = PROXY, **kwargs) -> UrlFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return UrlFetcher(settings=FetchSettings(proxy_url=proxy_url), client=client, **kwargs)


class TestFetchHtml:
    """Tests for raw page download."""

    @pytest.mark.asyncio
    async def test_direct_success(self) -> None:
        """A reachable page is fetched without the proxy."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text=PAGE)

        markup = await _fetcher(handler).fetch_html("https://example.com/docs")

        assert markup == PAGE
        assert seen == ["https://example.com/docs"]

    @pytest.mark.asyncio
    async def test_proxy_fallback(self) -> None:
        """A failed direct request is retried through the proxy."""
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            if request.url.host == "example.com":
                return httpx.Response(403)
            return httpx.Response(200, text=PAGE)

        markup = await _fetcher(handler).fetch_html("https://example.com/docs?a=1")

        assert markup == PAGE
        assert len(seen) == 2
        assert seen[1].host == "proxy.test"
        assert seen[1].params["url"] == "https://example.com/docs?a=1"

    @pytest.mark.asyncio
    async def test_both_routes_fail(self) -> None:
        """Both errors are reported when the proxy also fails."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        with pytest.raises(FetchError) as exc_info:
            await _fetcher(handler).fetch_html("https://example.com/docs")

        error = exc_info.value
        assert error.code == ErrorCode.FETCH_ERROR
        assert "Direct fetch error" in error.message
        assert "Proxy fetch error" in error.message
        assert error.details["url"] == "https://example.com/docs"

    @pytest.mark.asyncio
    async def test_no_proxy_configured(self) -> None:
        """Without a proxy the direct failure is final."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(FetchError) as exc_info:
            await _fetcher(handler, proxy_url="").fetch_html("https://example.com")

        assert calls == 1
        assert exc_info.value.code == ErrorCode.FETCH_ERROR


class TestFetchText:
    """Tests for text extraction from fetched pages."""

    @pytest.mark.asyncio
    async def test_extracts_text(self) -> None:
        """Markup is reduced to visible text."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=PAGE)

        assert await _fetcher(handler).fetch_text("https://example.com") == "Widget setup guide"

    @pytest.mark.asyncio
    async def test_empty_page(self) -> None:
        """A page without text is an EMPTY_CONTENT error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html><script>app()</script></html>")

        with pytest.raises(FetchError) as exc_info:
            await _fetcher(handler).fetch_text("https://example.com")

        assert exc_info.value.code == ErrorCode.EMPTY_CONTENT


class TestLoad:
    """Tests for loading pages as documents."""

    @pytest.mark.asyncio
    async def test_load_document(self) -> None:
        """Loaded pages are chunked url documents."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=PAGE)

        fetcher = _fetcher(handler, options=ChunkingOptions(chunk_size=2, overlap=0, preserve_paragraphs=False))
        document = await fetcher.load("https://example.com/guide/")

        assert document.kind == SourceKind.URL
        assert document.url == "https://example.com/guide/"
        assert document.name == "example.com/guide"
        assert [c.content for c in document.chunks] == ["Widget setup", "guide"]

    @pytest.mark.asyncio
    async def test_load_with_name(self) -> None:
        """An explicit name is used as is."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=PAGE)

        document = await _fetcher(handler).load("https://example.com", name="Guide")
        assert document.name == "Guide"

    @pytest.mark.asyncio
    async def test_load_too_large(self) -> None:
        """Pages over the token budget are rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=PAGE)

        with pytest.raises(DocumentError) as exc_info:
            await _fetcher(handler, max_tokens=1).load("https://example.com")

        assert exc_info.value.code == ErrorCode.DOCUMENT_TOO_LARGE
