"""HeadlinesApp: the surface a presentation loop drives each tick."""

import logging
import os
import queue

from headlines.config import AppConfig
from headlines.feed.client import FeedClient
from headlines.feed.models import DisplayRecord, FeedFailure
from headlines.feed.provider import FeedProvider
from headlines.pipeline.channels import ArticleChannel, ControlChannel, KeySet, Refresh, Shutdown
from headlines.pipeline.poll import PollAdapter
from headlines.pipeline.worker import FeedWorker
from headlines.settings import Settings, SettingsStore

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT = 5.0


class HeadlinesApp:
    """Wire settings, channels, the fetch worker and the poll adapter together.

    The presentation loop calls :meth:`start` once, then :meth:`poll` on every
    tick.  Key changes and refreshes are forwarded to the worker as control
    events; nothing here performs network I/O on the caller's thread.
    """

    def __init__(
        self,
        config: AppConfig,
        store: SettingsStore,
        *,
        provider: FeedProvider | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._settings = store.load()
        self._client: FeedClient | None = None
        if provider is None:
            self._client = FeedClient(config.feed.base_url, timeout=config.feed.timeout)
            provider = self._client
        self._provider = provider
        self._articles = ArticleChannel()
        self._control = ControlChannel()
        self._poller = PollAdapter(self._articles, limit=config.display.max_articles)
        self._worker: FeedWorker | None = None
        self._api_key_initialized = bool(self._settings.api_key)
        self._generation = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Spawn the worker, fetching immediately if a key is already known."""
        if self._worker is not None:
            raise RuntimeError("HeadlinesApp already started")
        key = self._settings.api_key or os.environ.get(self._config.feed.api_key_env, "")
        if key and not self._settings.api_key:
            logger.info("Using access key from $%s", self._config.feed.api_key_env)
            self._api_key_initialized = True
        self._worker = FeedWorker(
            self._provider,
            self._articles,
            self._control,
            initial_key=key,
            template=self._config.feed.request_template(),
            placeholder=self._config.feed.placeholder,
        )
        self._worker.start()

    def close(self) -> None:
        """Stop the worker and release the HTTP client."""
        if self._worker is not None and self._worker.is_alive():
            self._worker.cancel()
            try:
                self._control.send(Shutdown(), timeout=SHUTDOWN_TIMEOUT)
            except queue.Full:
                logger.warning("Control channel busy; could not deliver shutdown")
            self._worker.join(SHUTDOWN_TIMEOUT)
            if self._worker.is_alive():
                logger.warning("Feed worker did not stop within %.1fs", SHUTDOWN_TIMEOUT)
        if self._client is not None:
            self._client.close()

    # ------------------------------------------------------------------
    # Presentation hooks
    # ------------------------------------------------------------------

    def poll(self, max_new: int | None = None) -> list[DisplayRecord]:
        """Run one presentation tick and return newly visible records."""
        if self._settings.refresh_requested and self._control.try_send(Refresh(self._generation + 1)):
            self._settings.refresh_requested = False
            self._next_generation()
        return self._poller.drain(max_new)

    def set_api_key(self, key: str) -> None:
        """Persist a confirmed access key and hand it to the worker.

        Blocks while a previous control event is still waiting for the worker.
        """
        self._settings.api_key = key
        self._save()
        logger.info("Access key set")
        self._api_key_initialized = True
        self._control.send(KeySet(key, self._generation + 1))
        self._next_generation()

    def request_refresh(self) -> None:
        """Ask for a refetch; it is sent to the worker on the next :meth:`poll`."""
        self._settings.refresh_requested = True

    def toggle_theme(self) -> bool:
        """Flip dark mode, persist it and return the new value."""
        self._settings.dark_mode = not self._settings.dark_mode
        self._save()
        return self._settings.dark_mode

    def cancel_fetch(self) -> None:
        if self._worker is not None:
            self._worker.cancel()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def articles(self) -> list[DisplayRecord]:
        return list(self._poller.visible)

    @property
    def last_error(self) -> FeedFailure | None:
        return self._poller.last_error

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def api_key_initialized(self) -> bool:
        return self._api_key_initialized

    @property
    def refreshing(self) -> bool:
        return self._settings.refresh_requested

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _next_generation(self) -> None:
        self._generation += 1
        self._poller.expect(self._generation)

    def _save(self) -> None:
        try:
            self._store.save(self._settings)
        except OSError:
            logger.exception("Failed saving settings to %s", self._store.path)
