"""Protocol definitions for HTTP client abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by AsyncHttpClient.get.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        content_type: Content-Type header value
        headers: All response headers
        url: Final URL after any redirects
    """

    status_code: int
    content: bytes
    content_type: str
    headers: dict[str, str]
    url: str


@dataclass(frozen=True)
class FetchedPage:
    """
    HTML of a documentation page ready for conversion.

    Attributes:
        html: Decoded page text
        url: Page URL to resolve relative links against (never the relay URL)
    """

    html: str
    url: str


class PageFetcher(Protocol):
    """
    Protocol for the collaborator that supplies page HTML.

    Allows sessions to run against mock fetchers in tests.
    """

    async def fetch_page(self, url: str) -> FetchedPage:
        """
        Fetch a documentation page.

        Args:
            url: Page URL

        Returns:
            FetchedPage with decoded HTML and the URL to resolve links against

        Raises:
            FetchError: With a human-readable message on failure
        """
        ...
