"""Async HTTP client for fetching documentation pages."""

from __future__ import annotations

import asyncio
import logging
import random
from types import TracebackType
from urllib.parse import quote

import aiohttp
from charset_normalizer import from_bytes as detect_encoding

from ..errors import FetchError
from ..models.config import DEFAULT_USER_AGENT
from .protocols import FetchedPage, HttpResponse

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

# Messages shown to the user for common HTTP failures
STATUS_MESSAGES = {
    403: "Access to the documentation is forbidden. Please check the URL.",
    404: "The specified API documentation page was not found.",
    429: "Too many requests. Please try again later.",
}
TIMEOUT_MESSAGE = "Request timed out. Please try again."


class AsyncHttpClient:
    """
    Async HTTP client for documentation pages.

    Features:
    - Optional relay (a URL template containing ``{url}``) for pages that
      can't be reached directly
    - Exponential backoff retry on 429/5xx when ``max_retries`` > 0
    - Content size limit
    - Encoding detection via the Content-Type charset, then charset-normalizer
    - Failures mapped to FetchError with a human-readable message

    Example:
        async with AsyncHttpClient(timeout=10) as client:
            page = await client.fetch_page("https://docs.example.com/api")
            print(page.html[:100])
    """

    MAX_CONTENT_SIZE = 50 * 1024 * 1024  # 50 MB

    # Status codes that warrant a retry
    RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

    def __init__(
        self,
        timeout: float = 10.0,
        max_retries: int = 0,
        retry_base_delay: float = 1.0,
        max_content_size: int = MAX_CONTENT_SIZE,
        user_agent: str | None = None,
        relay_url: str | None = None,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            timeout: Request timeout in seconds
            max_retries: Retry attempts for retryable status codes
            retry_base_delay: Base delay for exponential backoff (seconds)
            max_content_size: Maximum response size in bytes
            user_agent: Custom User-Agent string
            relay_url: Relay URL template containing '{url}'
        """
        if relay_url is not None and "{url}" not in relay_url:
            raise ValueError("Relay URL must contain a '{url}' placeholder")

        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay
        self._max_content_size = max_content_size
        self._user_agent = user_agent or DEFAULT_USER_AGENT
        self._relay_url = relay_url

        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(
            headers={"User-Agent": self._user_agent, **DEFAULT_HEADERS},
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    def request_url(self, url: str) -> str:
        """URL actually requested for ``url`` (through the relay, if configured)."""
        if self._relay_url is None:
            return url
        return self._relay_url.format(url=quote(url, safe=""))

    def _calculate_retry_delay(self, attempt: int) -> float:
        """
        Calculate delay for exponential backoff with jitter.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay: float = self._retry_base_delay * (2**attempt)
        jitter: float = random.uniform(0, 1)
        return delay + jitter

    def _decode_content(self, content: bytes, content_type: str) -> str:
        """
        Decode content with encoding detection.

        Fallback chain:
        1. Content-Type header charset
        2. charset-normalizer detection
        3. UTF-8 with replacement
        """
        encoding = None
        if content_type:
            for part in content_type.split(";"):
                part = part.strip()
                if part.lower().startswith("charset="):
                    encoding = part.split("=", 1)[1].strip().strip("\"'")
                    break

        if encoding:
            try:
                return content.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"Failed to decode with declared encoding: {encoding}")

        best_match = detect_encoding(content).best()
        if best_match is not None:
            logger.debug(f"Detected encoding: {best_match.encoding}")
            return str(best_match)

        return content.decode("utf-8", errors="replace")

    async def get(
        self,
        url: str,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP GET request, retrying retryable status codes.

        Args:
            url: The URL to fetch
            timeout: Request timeout in seconds (uses default if None)
            headers: Optional additional headers

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            aiohttp.ClientError: On network errors
            asyncio.TimeoutError: When the request times out
            ValueError: On content size exceeded
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        timeout_val = timeout or self._timeout

        for attempt in range(self._max_retries + 1):
            async with self._session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=timeout_val),
                headers=headers,
                allow_redirects=True,
            ) as response:
                if response.status in self.RETRYABLE_STATUS_CODES and attempt < self._max_retries:
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"Got {response.status} for {url}, retrying in {delay:.1f}s "
                        f"(attempt {attempt + 1}/{self._max_retries + 1})"
                    )
                    await asyncio.sleep(delay)
                    continue

                content_length = response.headers.get("Content-Length")
                if content_length and int(content_length) > self._max_content_size:
                    raise ValueError(f"Content too large: {content_length} bytes")

                content = b""
                async for chunk in response.content.iter_chunked(8192):
                    content += chunk
                    if len(content) > self._max_content_size:
                        raise ValueError(f"Content size limit exceeded: >{self._max_content_size} bytes")

                return HttpResponse(
                    status_code=response.status,
                    content=content,
                    content_type=response.headers.get("Content-Type", ""),
                    headers=dict(response.headers),
                    url=str(response.url),
                )

        raise RuntimeError(f"Unexpected error fetching {url}")

    def decode_content(self, response: HttpResponse) -> str:
        """Decode response content to string."""
        return self._decode_content(response.content, response.content_type)

    async def fetch_page(self, url: str) -> FetchedPage:
        """
        Fetch a documentation page and decode its HTML.

        Args:
            url: Page URL

        Returns:
            FetchedPage; its URL is the final page URL after redirects, or
            the requested URL when a relay is used

        Raises:
            FetchError: On timeouts, HTTP errors and network failures
        """
        try:
            response = await self.get(self.request_url(url))
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out fetching {url}")
            raise FetchError(TIMEOUT_MESSAGE, url=url) from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"HTTP fetch error for {url}: {e}")
            raise FetchError(f"Failed to fetch document: {e}", url=url) from e

        if response.status_code >= 400:
            message = STATUS_MESSAGES.get(
                response.status_code,
                f"Failed to fetch document: HTTP {response.status_code}",
            )
            logger.error(f"Got HTTP {response.status_code} for {url}")
            raise FetchError(message, url=url, status_code=response.status_code)

        page_url = url if self._relay_url is not None else response.url
        logger.info(f"Fetched {url} ({len(response.content)} bytes)")
        return FetchedPage(html=self.decode_content(response), url=page_url)
