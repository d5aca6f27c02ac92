"""Non-blocking drain of the article channel, run once per presentation tick."""

import logging

from headlines.feed.models import DisplayRecord, FeedFailure
from headlines.pipeline.channels import ArticleChannel, ChannelDisconnected

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


class PollAdapter:
    """Move records from the article channel into the visible list.

    Once ``limit`` records are visible, further records are drained and
    discarded so the channel never backs up.  Failures are kept on
    :attr:`last_error` rather than shown as records.

    Every message carries the generation of the fetch that produced it.  The
    first record of a newer generation replaces the visible list, and
    messages older than the generation passed to :meth:`expect` are dropped
    unseen.
    """

    def __init__(self, channel: ArticleChannel, *, limit: int = DEFAULT_LIMIT) -> None:
        self._channel = channel
        self._limit = limit
        self.visible: list[DisplayRecord] = []
        self.last_error: FeedFailure | None = None
        self.discarded = 0
        self.stale = 0
        self.generation = 0
        self._expected = 0
        self._disconnect_logged = False

    def expect(self, generation: int) -> None:
        """Ignore anything produced by fetches older than *generation*."""
        self._expected = max(self._expected, generation)

    def drain(self, max_new: int | None = None) -> list[DisplayRecord]:
        """Pull up to *max_new* current messages (all of them when ``None``).

        Stale messages are skipped without counting against *max_new*.
        Returns only the records appended to :attr:`visible` by this call.
        """
        appended: list[DisplayRecord] = []
        pulled = 0
        while max_new is None or pulled < max_new:
            try:
                item = self._channel.try_recv()
            except ChannelDisconnected as exc:
                if not self._disconnect_logged:
                    logger.warning("Error receiving articles: %s", exc)
                    self._disconnect_logged = True
                break
            if item is None:
                break
            if item.generation < max(self._expected, self.generation):
                self.stale += 1
                continue
            pulled += 1

            if isinstance(item, FeedFailure):
                self.last_error = item
                continue
            if item.generation > self.generation:
                self.generation = item.generation
                self.visible.clear()
                appended.clear()
            self.last_error = None
            if len(self.visible) < self._limit:
                self.visible.append(item)
                appended.append(item)
            else:
                self.discarded += 1
        return appended
