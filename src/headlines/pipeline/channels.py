"""Channels bridging the worker thread and the presentation loop.

The article channel is an unbounded FIFO flowing worker -> presentation.  The
control channel flows presentation -> worker and holds at most one pending
event, so a sender blocks until the worker has taken the previous one.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Union

from headlines.feed.models import DisplayRecord, FeedFailure


@dataclass(frozen=True)
class KeySet:
    """A new access key was confirmed; fetch with it."""

    key: str
    generation: int = 0


@dataclass(frozen=True)
class Refresh:
    """Fetch again with the last known key."""

    generation: int = 0


@dataclass(frozen=True)
class Shutdown:
    """Stop the worker loop."""


ControlEvent = Union[KeySet, Refresh, Shutdown]
ArticleMessage = Union[DisplayRecord, FeedFailure]


class ChannelDisconnected(Exception):
    """The other side of a channel has gone away."""


class ArticleChannel:
    """Unbounded, order-preserving worker -> presentation stream."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[ArticleMessage] = queue.SimpleQueue()
        self._closed = threading.Event()

    def send(self, item: ArticleMessage) -> None:
        """Enqueue *item*; never blocks."""
        if self._closed.is_set():
            raise ChannelDisconnected("article channel is closed")
        self._queue.put(item)

    def try_recv(self) -> ArticleMessage | None:
        """Return the next item, or ``None`` when nothing is queued.

        Raises :class:`ChannelDisconnected` once the channel is closed and
        every queued item has been received.
        """
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            if self._closed.is_set():
                raise ChannelDisconnected("article channel sender has gone away") from None
            return None

    def close(self) -> None:
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()


class ControlChannel:
    """Capacity-1 presentation -> worker signal path.

    Every event is stamped with a sequence number when it is sent, so the
    receiver can tell whether it was queued before a given point in time.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[tuple[int, ControlEvent]] = queue.Queue(maxsize=1)
        self._lock = threading.Lock()
        self._last_seq = 0

    def send(self, event: ControlEvent, *, timeout: float | None = None) -> None:
        """Deliver *event*, blocking while a previous event is unconsumed.

        Raises :class:`queue.Full` if *timeout* elapses first.
        """
        self._queue.put((self._stamp(), event), timeout=timeout)

    def try_send(self, event: ControlEvent) -> bool:
        """Deliver *event* only if the slot is free. Returns whether it was accepted."""
        try:
            self._queue.put_nowait((self._stamp(), event))
        except queue.Full:
            return False
        return True

    def recv(self, *, timeout: float | None = None) -> ControlEvent:
        """Block until an event arrives. Raises :class:`queue.Empty` on timeout."""
        return self.recv_stamped(timeout=timeout)[1]

    def recv_stamped(self, *, timeout: float | None = None) -> tuple[int, ControlEvent]:
        """Like :meth:`recv`, but also return the event's sequence number."""
        return self._queue.get(timeout=timeout)

    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def last_seq(self) -> int:
        """Sequence number of the most recent send attempt (0 before any)."""
        with self._lock:
            return self._last_seq

    def _stamp(self) -> int:
        with self._lock:
            self._last_seq += 1
            return self._last_seq
