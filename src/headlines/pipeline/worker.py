"""Background worker that turns control events into streamed display records."""

from __future__ import annotations

import logging
import threading
from enum import Enum

from headlines.feed.errors import FeedError, FetchCancelled
from headlines.feed.mapper import DEFAULT_PLACEHOLDER, to_display_records
from headlines.feed.models import FeedFailure, FeedRequest
from headlines.feed.provider import FeedProvider
from headlines.pipeline.channels import (
    ArticleChannel,
    ArticleMessage,
    ChannelDisconnected,
    ControlChannel,
    KeySet,
    Refresh,
    Shutdown,
)

logger = logging.getLogger(__name__)


class WorkerState(str, Enum):
    """Lifecycle state of the worker loop."""

    IDLE = "idle"
    AWAITING_KEY = "awaiting_key"
    FETCHING = "fetching"
    STOPPED = "stopped"


class FeedWorker:
    """Single long-lived fetch loop running on a daemon thread.

    Starting with a non-empty key fetches immediately; afterwards the loop
    blocks on the control channel and fetches once per ``KeySet`` or
    ``Refresh`` event.  A failed fetch is logged, reported on the article
    channel as a :class:`FeedFailure` and never retried automatically.  A
    cancelled fetch is dropped quietly.
    """

    def __init__(
        self,
        provider: FeedProvider,
        articles: ArticleChannel,
        control: ControlChannel,
        *,
        initial_key: str = "",
        template: FeedRequest | None = None,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ) -> None:
        self._provider = provider
        self._articles = articles
        self._control = control
        self._key = initial_key
        self._template = template if template is not None else FeedRequest(api_key="")
        self._placeholder = placeholder
        self._cancel = threading.Event()
        self._lock = threading.Lock()
        self._cancel_through = -1
        self._state = WorkerState.IDLE
        self._fetch_count = 0
        self._thread = threading.Thread(target=self._run, name="feed-worker", daemon=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def cancel(self) -> None:
        """Abandon the fetch in flight and any fetch already queued.

        Control events sent before this call still take effect (a queued key
        is stored, a queued shutdown stops the loop) but trigger no fetch.
        """
        with self._lock:
            self._cancel_through = self._control.last_seq
            self._cancel.set()

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def fetch_count(self) -> int:
        """Number of fetch attempts made so far."""
        return self._fetch_count

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def _run(self) -> None:
        try:
            if self._key:
                self._fetch(0, self._key, 0)
            while True:
                self._state = WorkerState.AWAITING_KEY
                seq, event = self._control.recv_stamped()
                if isinstance(event, Shutdown):
                    logger.info("Feed worker shutting down")
                    break
                if isinstance(event, KeySet):
                    if not event.key:
                        logger.warning("Ignoring empty access key")
                        continue
                    self._key = event.key
                elif isinstance(event, Refresh):
                    if not self._key:
                        logger.warning("Refresh requested before an access key was set")
                        continue
                self._fetch(seq, self._key, event.generation)
        finally:
            self._state = WorkerState.STOPPED
            self._articles.close()

    def _begin(self, seq: int) -> bool:
        with self._lock:
            if seq <= self._cancel_through:
                return False
            self._cancel.clear()
            return True

    def _fetch(self, seq: int, key: str, generation: int) -> None:
        if not self._begin(seq):
            logger.info("Skipping fetch queued before cancel")
            return
        self._state = WorkerState.FETCHING
        self._fetch_count += 1
        request = self._template.with_key(key)
        try:
            response = self._provider.fetch(request, cancel=self._cancel)
        except FetchCancelled:
            logger.info("Fetch cancelled")
            return
        except FeedError as exc:
            logger.warning("Fetch failed (%s): %s", type(exc).__name__, exc)
            self._publish(FeedFailure.from_error(exc, generation=generation))
            return
        except Exception as exc:
            logger.exception("Unexpected error while fetching articles")
            self._publish(FeedFailure.from_error(exc, generation=generation))
            return

        records = to_display_records(response, placeholder=self._placeholder, generation=generation)
        logger.info("Fetched %d articles", len(records), extra={"extra_data": {"generation": generation}})
        for record in records:
            if self._cancel.is_set():
                logger.info("Fetch cancelled; dropping remaining articles")
                return
            if not self._publish(record):
                return

    def _publish(self, item: ArticleMessage) -> bool:
        try:
            self._articles.send(item)
        except ChannelDisconnected as exc:
            logger.error("Error sending article: %s", exc)
            return False
        return True
