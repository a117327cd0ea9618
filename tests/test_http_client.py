"""Tests for AsyncHttpClient."""

import asyncio
from unittest.mock import AsyncMock

import aiohttp
import pytest

from apidocs2md.errors import FetchError
from apidocs2md.http import AsyncHttpClient, HttpResponse

PAGE_URL = "https://docs.example.com/api/"


def make_response(
    status_code: int = 200,
    content: bytes = b"<html><body><p>Docs</p></body></html>",
    content_type: str = "text/html; charset=utf-8",
    url: str = PAGE_URL,
) -> HttpResponse:
    return HttpResponse(
        status_code=status_code,
        content=content,
        content_type=content_type,
        headers={"Content-Type": content_type},
        url=url,
    )


class TestRequestUrl:
    """Tests for relay URL handling."""

    def test_direct(self):
        """Test that without a relay the URL is requested as is."""
        assert AsyncHttpClient().request_url(PAGE_URL) == PAGE_URL

    def test_relay_template(self):
        """Test that the page URL is percent-encoded into the relay template."""
        client = AsyncHttpClient(relay_url="https://relay.example.com/raw?url={url}")

        assert (
            client.request_url("https://docs.example.com/api?v=2")
            == "https://relay.example.com/raw?url=https%3A%2F%2Fdocs.example.com%2Fapi%3Fv%3D2"
        )

    def test_relay_without_placeholder(self):
        """Test that a relay template must contain {url}."""
        with pytest.raises(ValueError):
            AsyncHttpClient(relay_url="https://relay.example.com/raw")


class TestFetchPage:
    """Tests for fetch_page and its error mapping."""

    @pytest.mark.asyncio
    async def test_success(self):
        """Test that HTML is decoded and the final URL reported."""
        client = AsyncHttpClient()
        client.get = AsyncMock(return_value=make_response(url="https://docs.example.com/api/v2/"))

        page = await client.fetch_page(PAGE_URL)

        assert page.html == "<html><body><p>Docs</p></body></html>"
        assert page.url == "https://docs.example.com/api/v2/"
        client.get.assert_awaited_once_with(PAGE_URL)

    @pytest.mark.asyncio
    async def test_relay_keeps_page_url(self):
        """Test that links resolve against the page, not the relay."""
        client = AsyncHttpClient(relay_url="https://relay.example.com/raw?url={url}")
        client.get = AsyncMock(return_value=make_response(url="https://relay.example.com/raw?url=x"))

        page = await client.fetch_page(PAGE_URL)

        assert page.url == PAGE_URL
        assert client.get.await_args.args[0].startswith("https://relay.example.com/raw?url=https%3A")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, message",
        [
            (404, "The specified API documentation page was not found."),
            (403, "Access to the documentation is forbidden. Please check the URL."),
            (429, "Too many requests. Please try again later."),
            (500, "Failed to fetch document: HTTP 500"),
        ],
    )
    async def test_http_errors(self, status_code, message):
        """Test the human-readable message for each failure status."""
        client = AsyncHttpClient()
        client.get = AsyncMock(return_value=make_response(status_code=status_code))

        with pytest.raises(FetchError) as exc_info:
            await client.fetch_page(PAGE_URL)

        assert str(exc_info.value) == message
        assert exc_info.value.status_code == status_code
        assert exc_info.value.url == PAGE_URL

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test the timeout message."""
        client = AsyncHttpClient()
        client.get = AsyncMock(side_effect=asyncio.TimeoutError())

        with pytest.raises(FetchError, match="Request timed out. Please try again."):
            await client.fetch_page(PAGE_URL)

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Test that other failures carry the underlying reason."""
        client = AsyncHttpClient()
        client.get = AsyncMock(side_effect=aiohttp.ClientConnectionError("connection refused"))

        with pytest.raises(FetchError) as exc_info:
            await client.fetch_page(PAGE_URL)

        assert str(exc_info.value) == "Failed to fetch document: connection refused"
        assert exc_info.value.status_code is None


class TestDecoding:
    """Tests for response decoding."""

    def test_declared_charset(self):
        """Test that the Content-Type charset is used."""
        client = AsyncHttpClient()
        response = make_response(content="Grüße".encode("latin-1"), content_type="text/html; charset=ISO-8859-1")

        assert client.decode_content(response) == "Grüße"

    def test_bogus_charset_falls_back(self):
        """Test that an unknown charset does not break decoding."""
        client = AsyncHttpClient()
        response = make_response(content=b"<p>plain ascii</p>", content_type="text/html; charset=nope")

        assert client.decode_content(response) == "<p>plain ascii</p>"


class TestClientLifecycle:
    """Tests for session handling and retries."""

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test that a session is opened and closed."""
        async with AsyncHttpClient() as client:
            assert client._session is not None

        assert client._session is None

    @pytest.mark.asyncio
    async def test_get_requires_context(self):
        """Test that get fails outside async with."""
        with pytest.raises(RuntimeError):
            await AsyncHttpClient().get(PAGE_URL)

    def test_retry_delay_grows(self):
        """Test exponential backoff with jitter."""
        client = AsyncHttpClient(retry_base_delay=1.0)

        assert 1.0 <= client._calculate_retry_delay(0) <= 2.0
        assert 4.0 <= client._calculate_retry_delay(2) <= 5.0
