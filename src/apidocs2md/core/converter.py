"""Synchronous HTML to Markdown entry point."""

from __future__ import annotations

import logging
from typing import Optional, Union

from ..conversion.extractor import MainContentExtractor
from ..conversion.markdown import Html2TextConverter, RuleBasedConverter
from ..conversion.postprocess import PostProcessor
from ..conversion.protocols import ContentExtractor, MarkdownConverter
from ..models.config import ConverterConfig

logger = logging.getLogger(__name__)


def build_markdown_converter(config: ConverterConfig) -> MarkdownConverter:
    """Create the Markdown engine selected in ``config``."""
    if config.markdown.engine == "html2text":
        # html2text applies its own minimal escaping
        return Html2TextConverter()
    return RuleBasedConverter(escape_markdown=config.markdown.escape_markdown)


class DocumentConverter:
    """
    Turns a documentation page's HTML into Markdown.

    Each call parses its own document tree; nothing is cached or shared
    between calls, so one instance can be reused freely.

    Example:
        converter = DocumentConverter()
        markdown = converter.convert(html, "https://docs.example.com/api/")
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        extractor: Optional[ContentExtractor] = None,
        converter: Optional[MarkdownConverter] = None,
        post_processor: Optional[PostProcessor] = None,
    ):
        """
        Initialize the document converter.

        Args:
            config: Configuration (defaults if None)
            extractor: Main-content extractor (built from config if None)
            converter: Markdown engine (built from config if None)
            post_processor: Post-processor (built from config if None)
        """
        self.config = config or ConverterConfig()
        extraction = self.config.extraction
        self._extractor = extractor or MainContentExtractor(
            content_selectors=extraction.content_selectors,
            remove_selectors=extraction.remove_selectors,
            preserved_attributes=extraction.preserved_attributes,
            min_candidate_length=extraction.min_candidate_length,
        )
        self._converter = converter or build_markdown_converter(self.config)
        self._post_processor = post_processor or PostProcessor(
            min_length=self.config.markdown.min_content_length,
        )

    def render(self, html: Union[str, bytes], base_url: str) -> str:
        """
        Convert HTML to normalized Markdown without validating the result.

        Args:
            html: Raw HTML of the page
            base_url: Page URL used to resolve relative links

        Returns:
            Post-processed Markdown (may be empty)
        """
        content = self._extractor.extract(html, base_url)
        markdown = self._converter.convert(content, base_url)
        return self._post_processor.process(markdown)

    def convert(self, html: Union[str, bytes], base_url: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: Raw HTML of the page
            base_url: Page URL used to resolve relative links

        Returns:
            Markdown string

        Raises:
            EmptyExtractionError: If nothing could be extracted
            InsufficientExtractionError: If the result is too short to be the page's content
        """
        markdown = self._post_processor.validate(self.render(html, base_url))
        logger.debug(f"Converted {base_url} to {len(markdown)} characters of Markdown")
        return markdown


def convert(html: Union[str, bytes], base_url: str, config: Optional[ConverterConfig] = None) -> str:
    """
    Convert a documentation page's HTML to Markdown.

    Args:
        html: Raw HTML of the page
        base_url: Page URL used to resolve relative links
        config: Optional configuration

    Returns:
        Markdown string

    Raises:
        EmptyExtractionError: If nothing could be extracted
        InsufficientExtractionError: If the result is shorter than the minimum length
    """
    return DocumentConverter(config).convert(html, base_url)
