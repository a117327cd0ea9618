"""Main content region detection."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from ..models.config import DEFAULT_CONTENT_SELECTORS

logger = logging.getLogger(__name__)


def text_length(element: Tag) -> int:
    """Length of an element's rendered text with surrounding whitespace trimmed."""
    return len(element.get_text().strip())


@dataclass(frozen=True)
class ContentCandidate:
    """A node considered as the page's main content region."""

    element: Tag
    text_length: int


class ContentLocator:
    """
    Finds the single subtree most likely to hold the page's main content.

    Selection order:
        1. The first match of each content selector, in priority order; the
           first one whose text is longer than ``min_length`` wins.
        2. The longest ``div`` inside the body above ``min_length``. Ties are
           resolved in document order (first one found wins).
        3. The body itself (or the whole document if there is no body).

    The tree is only read, never modified.

    Example:
        locator = ContentLocator()
        main = locator.locate(soup)
    """

    def __init__(
        self,
        content_selectors: Iterable[str] | None = None,
        min_length: int = 100,
    ) -> None:
        """
        Initialize the locator.

        Args:
            content_selectors: CSS selectors for main content (overrides defaults)
            min_length: Text length a candidate must exceed
        """
        self._content_selectors = list(content_selectors or DEFAULT_CONTENT_SELECTORS)
        self._min_length = min_length

    @staticmethod
    def body(soup: BeautifulSoup | Tag) -> Tag:
        """Return the document body, or the document itself when it has none."""
        body = soup.find("body")
        if isinstance(body, Tag):
            return body
        return soup

    def match_selectors(self, soup: BeautifulSoup | Tag) -> Tag | None:
        """Return the first selector match with enough text, if any."""
        for selector in self._content_selectors:
            element = soup.select_one(selector)
            if element is not None and text_length(element) > self._min_length:
                logger.debug(f"Main content matched selector {selector!r}")
                return element
        return None

    def candidates(self, soup: BeautifulSoup | Tag) -> list[ContentCandidate]:
        """
        Score every ``div`` in the body that has enough text.

        Returns:
            Candidates in document order
        """
        found = []
        for div in self.body(soup).find_all("div"):
            length = text_length(div)
            if length > self._min_length:
                found.append(ContentCandidate(element=div, text_length=length))
        return found

    def largest_block(self, soup: BeautifulSoup | Tag) -> ContentCandidate | None:
        """Return the candidate with the most text; the earliest wins a tie."""
        best: ContentCandidate | None = None
        for candidate in self.candidates(soup):
            if best is None or candidate.text_length > best.text_length:
                best = candidate
        return best

    def locate(self, soup: BeautifulSoup | Tag) -> Tag:
        """
        Locate the main content element.

        Args:
            soup: Parsed (and sanitized) document

        Returns:
            Exactly one element; falls back to the body
        """
        element = self.match_selectors(soup)
        if element is not None:
            return element

        best = self.largest_block(soup)
        if best is not None:
            logger.debug(f"Main content is the largest text block ({best.text_length} chars)")
            return best.element

        logger.warning("No main content region found, converting the whole body")
        return self.body(soup)
