"""FeedProvider protocol defining the fetch interface."""

import threading
from typing import Protocol

from headlines.feed.models import FeedRequest, FeedResponse


class FeedProvider(Protocol):
    """Structural protocol for anything the worker can fetch from."""

    def fetch(self, request: FeedRequest, *, cancel: threading.Event | None = None) -> FeedResponse: ...
