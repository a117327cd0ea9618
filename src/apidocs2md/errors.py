"""Exception types raised by apidocs2md."""

from __future__ import annotations


class Apidocs2mdError(Exception):
    """Base class for all apidocs2md errors."""


class ConversionError(Apidocs2mdError):
    """Raised when HTML could not be turned into usable Markdown."""


class EmptyExtractionError(ConversionError):
    """The converted document was empty after trimming."""

    def __init__(
        self,
        message: str = (
            "No content could be extracted. The page might be protected or require authentication."
        ),
    ) -> None:
        super().__init__(message)


class InsufficientExtractionError(ConversionError):
    """The converted document was shorter than the minimum length."""

    def __init__(self, length: int, min_length: int) -> None:
        self.length = length
        self.min_length = min_length
        super().__init__(
            "The extracted content seems too short. "
            "Please check if the URL points to the correct documentation page."
        )


class InvalidUrlError(Apidocs2mdError):
    """The requested URL was rejected before fetching."""


class FetchError(Apidocs2mdError):
    """
    Fetching the documentation page failed.

    Attributes:
        url: URL that was requested
        status_code: HTTP status code, if a response was received
    """

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)
