"""Core API: synchronous conversion, fetch sessions and output."""

from .converter import DocumentConverter, build_markdown_converter, convert
from .output import DEFAULT_OUTPUT_FILENAME, save_markdown
from .session import ConversionSession

__all__ = [
    "ConversionSession",
    "DEFAULT_OUTPUT_FILENAME",
    "DocumentConverter",
    "build_markdown_converter",
    "convert",
    "save_markdown",
]
