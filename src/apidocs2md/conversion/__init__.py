"""Content conversion for apidocs2md (HTML to Markdown)."""

from .extractor import MainContentExtractor
from .locator import ContentCandidate, ContentLocator
from .markdown import Html2TextConverter, MarkdownRenderer, RuleBasedConverter
from .normalizers import CodeBlockNormalizer, TableNormalizer
from .postprocess import DEFAULT_PASSES, PostProcessor, PostProcessPass
from .protocols import ContentExtractor, MarkdownConverter
from .rules import CUSTOM_RULES, DEFAULT_RULES, GENERIC_RULES, ConversionRule
from .sanitizer import MarkupSanitizer

__all__ = [
    # Protocols
    "ContentExtractor",
    "MarkdownConverter",
    # Extraction
    "MainContentExtractor",
    "MarkupSanitizer",
    "ContentLocator",
    "ContentCandidate",
    "TableNormalizer",
    "CodeBlockNormalizer",
    # Conversion
    "RuleBasedConverter",
    "Html2TextConverter",
    "MarkdownRenderer",
    "ConversionRule",
    "CUSTOM_RULES",
    "GENERIC_RULES",
    "DEFAULT_RULES",
    # Post-processing
    "PostProcessor",
    "PostProcessPass",
    "DEFAULT_PASSES",
]
