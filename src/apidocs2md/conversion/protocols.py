"""Protocol definitions for content conversion."""

from typing import Protocol, Union

from bs4 import Tag


class ContentExtractor(Protocol):
    """
    Protocol for extracting main content from HTML.

    Implementations should return the element holding the page's main
    documentation content, with navigation, ads and other boilerplate
    already removed.
    """

    def extract(self, html: Union[str, bytes], url: str) -> Tag:
        """
        Extract main content from HTML.

        Args:
            html: Raw HTML
            url: Source URL

        Returns:
            Main-content element (cleaned, still HTML)
        """
        ...


class MarkdownConverter(Protocol):
    """
    Protocol for converting an extracted element to Markdown.

    Output is raw Markdown; post-processing and validation happen later.
    """

    def convert(self, element: Tag, url: str) -> str:
        """
        Convert an element's content to Markdown.

        Args:
            element: Main-content element
            url: Source URL (for resolving relative links)

        Returns:
            Markdown string
        """
        ...
