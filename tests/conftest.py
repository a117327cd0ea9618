"""Shared fixtures for apidocs2md tests."""

from __future__ import annotations

import logging

import pytest

from apidocs2md.http import FetchedPage

PAGE_URL = "https://docs.example.com/api/"

PAGE_HTML = """<html>
<head><title>Payments API</title><script>track()</script></head>
<body>
    <nav><a href="/">Home</a> <a href="/pricing">Pricing</a></nav>
    <main>
        <h1>Payments API</h1>
        <p>The Payments API lets you create, capture and refund payments from your server using simple REST calls.</p>
        <p>See the <a href="../guide">integration guide</a> before you start.</p>
    </main>
    <footer>Copyright Example Inc.</footer>
</body>
</html>"""


class MockFetcher:
    """Page fetcher returning canned HTML or raising a canned error."""

    def __init__(self, html: str = PAGE_HTML, page_url: str | None = None, error: Exception | None = None):
        self.html = html
        self.page_url = page_url
        self.error = error
        self.requested: list[str] = []

    async def fetch_page(self, url: str) -> FetchedPage:
        self.requested.append(url)
        if self.error is not None:
            raise self.error
        return FetchedPage(html=self.html, url=self.page_url or url)


@pytest.fixture
def page_html():
    """HTML of a small documentation page."""
    return PAGE_HTML


@pytest.fixture
def mock_fetcher():
    """Fetcher serving PAGE_HTML."""
    return MockFetcher()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so they don't outlive captured streams."""
    yield
    logger = logging.getLogger("apidocs2md")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_fetcher():
    """Factory for MockFetcher instances with custom HTML, URL or error."""
    return MockFetcher
