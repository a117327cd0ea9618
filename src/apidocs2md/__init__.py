"""
apidocs2md - Convert API documentation pages to clean Markdown.

Usage:
    from apidocs2md import convert

    markdown = convert(html, "https://docs.example.com/api/")

    # Or fetch the page as well:
    from apidocs2md import ConversionSession

    async with ConversionSession() as session:
        async for event in session.run("https://docs.example.com/api/"):
            print(event.progress, event.message)
"""

__version__ = "1.0.0"

from .core import ConversionSession, DocumentConverter, convert, save_markdown
from .errors import (
    Apidocs2mdError,
    ConversionError,
    EmptyExtractionError,
    FetchError,
    InsufficientExtractionError,
    InvalidUrlError,
)
from .models.config import (
    ConverterConfig,
    ExtractionConfig,
    MarkdownConfig,
    NetworkConfig,
    OutputConfig,
)
from .models.events import ConversionEvent, ConversionStatus

__all__ = [
    "__version__",
    # Core
    "convert",
    "DocumentConverter",
    "ConversionSession",
    "save_markdown",
    # Config
    "ConverterConfig",
    "ExtractionConfig",
    "MarkdownConfig",
    "NetworkConfig",
    "OutputConfig",
    # Events
    "ConversionEvent",
    "ConversionStatus",
    # Errors
    "Apidocs2mdError",
    "ConversionError",
    "EmptyExtractionError",
    "InsufficientExtractionError",
    "InvalidUrlError",
    "FetchError",
]
