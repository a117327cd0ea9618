"""Conversion session with a streaming event API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from types import TracebackType

from ..errors import Apidocs2mdError
from ..http import AsyncHttpClient, PageFetcher
from ..models.config import ConverterConfig
from ..models.events import ConversionEvent, ConversionStatus
from ..security.url_validator import UrlValidator
from .converter import DocumentConverter

logger = logging.getLogger(__name__)


class ConversionSession:
    """
    Fetches one documentation page and converts it, reporting progress.

    ``run`` yields a FETCHING event, a CONVERTING event, and then exactly
    one terminal event: COMPLETED carrying the Markdown, or ERROR carrying
    a human-readable message. Errors never escape ``run``.

    Example:
        async with ConversionSession(config) as session:
            async for event in session.run("https://docs.example.com/api"):
                print(f"{event.progress}% {event.message}")

        if session.markdown:
            save_markdown(session.markdown, config.output.path)
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        fetcher: PageFetcher | None = None,
        converter: DocumentConverter | None = None,
    ):
        """
        Initialize the session.

        Args:
            config: Configuration (defaults if None)
            fetcher: Page fetcher; an AsyncHttpClient is opened on entry if None
            converter: Document converter (built from config if None)
        """
        self.config = config or ConverterConfig()
        self._fetcher = fetcher
        self._owned_client: AsyncHttpClient | None = None
        self._converter = converter or DocumentConverter(self.config)
        self._validator = UrlValidator(allow_private_hosts=self.config.network.allow_private_hosts)

        self.status = ConversionStatus.IDLE
        self.markdown: str | None = None
        self.error: str | None = None

    async def __aenter__(self) -> ConversionSession:
        """Enter async context and open an HTTP client if none was given."""
        if self._fetcher is None:
            network = self.config.network
            self._owned_client = AsyncHttpClient(
                timeout=network.timeout,
                max_retries=network.max_retries,
                user_agent=network.user_agent,
                relay_url=network.relay_url,
            )
            await self._owned_client.__aenter__()
            self._fetcher = self._owned_client
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close the owned HTTP client."""
        if self._owned_client is not None:
            await self._owned_client.__aexit__(exc_type, exc_val, exc_tb)
            self._owned_client = None
            self._fetcher = None

    def _event(self, status: ConversionStatus, message: str = "", **kwargs: object) -> ConversionEvent:
        self.status = status
        return ConversionEvent.for_status(status, message, **kwargs)

    async def run(self, url: str) -> AsyncIterator[ConversionEvent]:
        """
        Fetch and convert a page.

        Args:
            url: Documentation page URL

        Yields:
            ConversionEvent for each state the session enters
        """
        if self._fetcher is None:
            raise RuntimeError("Session not initialized. Use 'async with' context manager.")

        self.markdown = None
        self.error = None

        try:
            url = self._validator.check(url)

            yield self._event(ConversionStatus.FETCHING, "Fetching documentation...", url=url)
            page = await self._fetcher.fetch_page(url)

            yield self._event(ConversionStatus.CONVERTING, "Converting to Markdown...", url=url)
            markdown = await asyncio.to_thread(self._converter.convert, page.html, page.url)
        except Apidocs2mdError as e:
            logger.error(f"Conversion of {url} failed: {e}")
            self.error = str(e)
            yield self._event(ConversionStatus.ERROR, str(e), url=url, error=str(e))
            return

        self.markdown = markdown
        logger.info(f"Converted {url} ({len(markdown)} characters)")
        yield self._event(
            ConversionStatus.COMPLETED,
            "Conversion completed successfully!",
            url=url,
            markdown=markdown,
        )

    async def convert_url(self, url: str) -> str | None:
        """Run the session to completion and return the Markdown (None on error)."""
        async for _ in self.run(url):
            pass
        return self.markdown
