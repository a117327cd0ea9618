"""Configuration and event models for apidocs2md."""

from .config import (
    DEFAULT_CONTENT_SELECTORS,
    DEFAULT_PRESERVED_ATTRIBUTES,
    DEFAULT_REMOVE_SELECTORS,
    ConverterConfig,
    ExtractionConfig,
    MarkdownConfig,
    NetworkConfig,
    OutputConfig,
)
from .events import STATUS_PROGRESS, ConversionEvent, ConversionStatus

__all__ = [
    # Config
    "ConverterConfig",
    "ExtractionConfig",
    "MarkdownConfig",
    "NetworkConfig",
    "OutputConfig",
    "DEFAULT_CONTENT_SELECTORS",
    "DEFAULT_REMOVE_SELECTORS",
    "DEFAULT_PRESERVED_ATTRIBUTES",
    # Events
    "ConversionEvent",
    "ConversionStatus",
    "STATUS_PROGRESS",
]
