"""newsdata.io HTTP client.

Builds the query URL, executes it through ``httpx`` (blocking or async) and
decodes the reply into a :class:`FeedResponse`.  Both execution paths share
URL building and reply interpretation so their error contracts are identical.
"""

import logging
import threading
from typing import Any

import httpx
from pydantic import ValidationError

from headlines.feed.errors import FetchCancelled, ParseError, TransportError, UrlError, map_response_error
from headlines.feed.models import FeedRequest, FeedResponse

logger = logging.getLogger(__name__)

BASE_URL = "https://newsdata.io/api/1/news"


class FeedClient:
    """Thin wrapper around ``httpx`` for the newsdata.io news endpoint.

    The blocking client is created lazily and reused across fetches; the async
    path opens a short-lived :class:`httpx.AsyncClient` per call so it is not
    bound to a single event loop.
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._async_transport = async_transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "FeedClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "FeedClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_url(self, request: FeedRequest) -> httpx.URL:
        """Return the full query URL for *request*.

        Raises :class:`UrlError` when the base endpoint is unusable or the
        request carries no access key.
        """
        if not request.api_key:
            raise UrlError("An access key is required to fetch articles")
        try:
            base = httpx.URL(self._base_url)
        except httpx.InvalidURL as exc:
            raise UrlError(f"Failed to parse url {self._base_url!r}: {exc}") from exc
        if base.scheme not in ("http", "https") or not base.host:
            raise UrlError(f"Failed to parse url {self._base_url!r}: expected an absolute http(s) URL")
        return base.copy_merge_params(request.query_params())

    def fetch(self, request: FeedRequest, *, cancel: threading.Event | None = None) -> FeedResponse:
        """Fetch articles, blocking until the provider answers."""
        url = self.build_url(request)
        _check_cancelled(cancel)
        logger.debug(
            "Fetching %s articles for %s/%s", request.category.value, request.country.value, request.language.value
        )
        try:
            reply = self._sync_client().get(url)
        except httpx.TransportError as exc:
            raise TransportError(f"Failed fetching articles: {exc}") from exc
        _check_cancelled(cancel)
        return _interpret(reply)

    async def fetch_async(self, request: FeedRequest, *, cancel: threading.Event | None = None) -> FeedResponse:
        """Fetch articles without blocking the running event loop."""
        url = self.build_url(request)
        _check_cancelled(cancel)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._async_transport) as client:
                reply = await client.get(url)
        except httpx.TransportError as exc:
            raise TransportError(f"Failed async fetch: {exc}") from exc
        _check_cancelled(cancel)
        return _interpret(reply)

    def close(self) -> None:
        """Release the pooled blocking connection, if one was opened."""
        if self._client is not None:
            self._client.close()
            self._client = None

    async def aclose(self) -> None:
        """Async counterpart of :meth:`close`.

        Async fetches close their own client, so only the pooled blocking
        connection needs releasing.
        """
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _sync_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, transport=self._transport)
        return self._client


def _check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise FetchCancelled("Fetch cancelled")


def _interpret(reply: httpx.Response) -> FeedResponse:
    """Decode *reply* and enforce the provider's status contract.

    A non-2xx reply without a readable provider envelope is a transport
    failure; with one, its error code wins.
    """
    try:
        payload = reply.json()
    except ValueError as exc:
        if reply.is_error:
            raise TransportError(f"Provider returned HTTP {reply.status_code}") from exc
        raise ParseError(f"Article parsing failed: {exc}") from exc

    try:
        response = FeedResponse.from_api(payload)
    except ValidationError as exc:
        if reply.is_error:
            raise TransportError(f"Provider returned HTTP {reply.status_code}") from exc
        raise ParseError(f"Article parsing failed: {exc.error_count()} invalid field(s)") from exc

    if not response.ok:
        raise map_response_error(response.code)
    if reply.is_error:
        raise TransportError(f"Provider returned HTTP {reply.status_code}")
    return response
