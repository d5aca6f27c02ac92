"""Tests for the PollAdapter display cap and failure handling."""

import logging

import pytest
from headlines.feed.models import DisplayRecord, FeedFailure
from headlines.pipeline.channels import ArticleChannel
from headlines.pipeline.poll import PollAdapter


def _record(i: int, generation: int = 0) -> DisplayRecord:
    return DisplayRecord(title=f"Story {i}", description="...", link=f"https://example.com/{i}", generation=generation)


def _filled(count: int) -> ArticleChannel:
    channel = ArticleChannel()
    for i in range(count):
        channel.send(_record(i))
    return channel


def test_drain_empty_channel() -> None:
    adapter = PollAdapter(ArticleChannel())
    assert adapter.drain() == []
    assert adapter.drain(1) == []
    assert adapter.visible == []


def test_drain_all_in_order() -> None:
    adapter = PollAdapter(_filled(3))
    assert adapter.drain() == [_record(0), _record(1), _record(2)]
    assert adapter.drain() == []


def test_drain_respects_max_new() -> None:
    adapter = PollAdapter(_filled(3))
    assert adapter.drain(2) == [_record(0), _record(1)]
    assert adapter.drain(2) == [_record(2)]


def test_display_cap_one_per_tick() -> None:
    adapter = PollAdapter(_filled(15))
    for _ in range(15):
        adapter.drain(1)
        assert len(adapter.visible) <= 10

    assert adapter.visible == [_record(i) for i in range(10)]
    assert adapter.discarded == 5
    # Everything was drained even though only ten are shown.
    assert adapter.drain() == []


def test_drain_past_cap_returns_nothing_new() -> None:
    adapter = PollAdapter(_filled(12), limit=10)
    assert len(adapter.drain()) == 10
    assert adapter.discarded == 2


@pytest.mark.parametrize("limit", [1, 3])
def test_custom_limit(limit: int) -> None:
    adapter = PollAdapter(_filled(5), limit=limit)
    adapter.drain()
    assert len(adapter.visible) == limit


def test_failure_sets_last_error_and_record_clears_it() -> None:
    channel = ArticleChannel()
    failure = FeedFailure(kind="ApiError", message="Your API key has been disabled")
    channel.send(failure)
    adapter = PollAdapter(channel)

    assert adapter.drain() == []
    assert adapter.last_error == failure

    channel.send(_record(1))
    adapter.drain()
    assert adapter.last_error is None


def test_disconnect_is_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    channel = _filled(1)
    channel.close()
    adapter = PollAdapter(channel)

    with caplog.at_level(logging.WARNING, logger="headlines.pipeline.poll"):
        assert adapter.drain() == [_record(0)]
        assert adapter.drain() == []

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1



# ---------------------------------------------------------------------------
# Generations
# ---------------------------------------------------------------------------


def test_newer_generation_replaces_visible() -> None:
    channel = _filled(2)
    adapter = PollAdapter(channel)
    adapter.drain()

    channel.send(_record(7, generation=1))
    assert adapter.drain() == [_record(7, generation=1)]
    assert adapter.visible == [_record(7, generation=1)]
    assert adapter.generation == 1


def test_expected_generation_drops_queued_older_records() -> None:
    channel = _filled(3)
    adapter = PollAdapter(channel)
    assert adapter.drain(1) == [_record(0)]

    adapter.expect(1)
    for i in range(2):
        channel.send(_record(10 + i, generation=1))

    assert adapter.drain(1) == [_record(10, generation=1)]
    assert adapter.drain() == [_record(11, generation=1)]
    assert adapter.visible == [_record(10, generation=1), _record(11, generation=1)]
    assert adapter.stale == 2


def test_stale_failure_does_not_set_last_error() -> None:
    channel = ArticleChannel()
    channel.send(FeedFailure(kind="TransportError", message="old", generation=0))
    adapter = PollAdapter(channel)
    adapter.expect(1)
    adapter.drain()
    assert adapter.last_error is None


def test_failure_of_new_generation_keeps_previous_records() -> None:
    channel = _filled(2)
    adapter = PollAdapter(channel)
    adapter.drain()

    adapter.expect(1)
    channel.send(FeedFailure(kind="ApiError", message="Unknown error 1", generation=1))
    assert adapter.drain() == []
    assert adapter.visible == [_record(0), _record(1)]
    assert adapter.last_error is not None


def test_cap_applies_per_generation() -> None:
    channel = _filled(12)
    adapter = PollAdapter(channel)
    adapter.drain()
    for i in range(3):
        channel.send(_record(i, generation=1))
    adapter.drain()
    assert adapter.visible == [_record(i, generation=1) for i in range(3)]
