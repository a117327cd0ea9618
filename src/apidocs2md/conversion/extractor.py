"""Main content extraction from HTML pages."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag

from .locator import ContentLocator
from .normalizers import CodeBlockNormalizer, TableNormalizer
from .sanitizer import MarkupSanitizer

logger = logging.getLogger(__name__)


class MainContentExtractor:
    """
    Extracts the main content element from an HTML document.

    Runs the sanitizer over the whole page, locates the main content
    region, then cleans it and normalizes its tables and code blocks so the
    Markdown converter sees a predictable tree.

    Example:
        extractor = MainContentExtractor()
        content = extractor.extract(html, "https://docs.example.com/page")
    """

    def __init__(
        self,
        content_selectors: Iterable[str] | None = None,
        remove_selectors: Iterable[str] | None = None,
        preserved_attributes: Iterable[str] | None = None,
        min_candidate_length: int = 100,
    ):
        """
        Initialize the content extractor.

        Args:
            content_selectors: CSS selectors for main content (overrides defaults)
            remove_selectors: CSS selectors for elements to remove (extends defaults)
            preserved_attributes: Attributes kept inside the main content
            min_candidate_length: Text length a content candidate must exceed
        """
        self._sanitizer = MarkupSanitizer(remove_selectors, preserved_attributes)
        self._locator = ContentLocator(content_selectors, min_length=min_candidate_length)
        self._table_normalizer = TableNormalizer()
        self._code_normalizer = CodeBlockNormalizer()

    def _detect_encoding(self, html: bytes) -> str:
        """Detect character encoding from HTML content."""
        head = html[:2048].decode("latin-1", errors="ignore")
        charset_match = re.search(r'charset=["\']?([^"\'\s/>]+)', head, re.IGNORECASE)
        if charset_match:
            return charset_match.group(1).strip()
        return "utf-8"

    def parse(self, html: str | bytes) -> BeautifulSoup:
        """Parse HTML text (or bytes) to BeautifulSoup."""
        if isinstance(html, bytes):
            encoding = self._detect_encoding(html)
            try:
                html = html.decode(encoding, errors="replace")
            except LookupError:
                html = html.decode("utf-8", errors="replace")
        return BeautifulSoup(html, "html.parser")

    def extract(self, html: str | bytes, url: str) -> Tag:
        """
        Extract the main content from HTML.

        Args:
            html: Raw HTML
            url: Source URL (for logging; links are resolved during conversion)

        Returns:
            The cleaned main-content element, still attached to its document
        """
        soup = self.parse(html)
        self._sanitizer.sanitize(soup)

        content = self._locator.locate(soup)
        logger.debug(f"Main content for {url}: <{content.name}> with {len(content.get_text().strip())} chars")

        self._sanitizer.clean(content)
        self._table_normalizer.normalize(content)
        self._code_normalizer.normalize(content)
        return content
