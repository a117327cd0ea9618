"""HTTP fetching for apidocs2md."""

from .client import AsyncHttpClient
from .protocols import FetchedPage, HttpResponse, PageFetcher

__all__ = [
    "AsyncHttpClient",
    "FetchedPage",
    "HttpResponse",
    "PageFetcher",
]
