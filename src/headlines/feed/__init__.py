"""Feed client package for the newsdata.io provider."""

from headlines.feed.client import FeedClient
from headlines.feed.errors import ApiError, FeedError, FetchCancelled, ParseError, TransportError, UrlError
from headlines.feed.models import Article, DisplayRecord, FeedFailure, FeedRequest, FeedResponse
from headlines.feed.provider import FeedProvider

__all__ = [
    "ApiError",
    "Article",
    "DisplayRecord",
    "FeedClient",
    "FeedError",
    "FeedFailure",
    "FeedProvider",
    "FeedRequest",
    "FeedResponse",
    "FetchCancelled",
    "ParseError",
    "TransportError",
    "UrlError",
]
