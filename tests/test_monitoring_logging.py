"""Tests for console and structured JSON logging."""

import json
import logging
import sys
import threading
from collections.abc import Iterator
from pathlib import Path

import pytest
from headlines.monitoring.logging import JSONFormatter, setup_logging, setup_structured_logging


def _record(msg: str = "plain", **kwargs: object) -> logging.LogRecord:
    return logging.LogRecord(
        name="headlines.pipeline.worker",
        level=logging.INFO,
        pathname="worker.py",
        lineno=1,
        msg=msg,
        args=kwargs.pop("args", ()),  # type: ignore[arg-type]
        exc_info=kwargs.pop("exc_info", None),  # type: ignore[arg-type]
    )


@pytest.fixture
def restore_root() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    def test_formats_basic_message(self) -> None:
        data = json.loads(JSONFormatter().format(_record("Fetched %d articles", args=(3,))))
        assert data["message"] == "Fetched 3 articles"
        assert data["level"] == "INFO"
        assert data["logger"] == "headlines.pipeline.worker"
        assert "timestamp" in data

    def test_includes_thread_name(self) -> None:
        record = _record()
        record.threadName = "feed-worker"
        data = json.loads(JSONFormatter().format(record))
        assert data["thread"] == "feed-worker"

    def test_formats_exception(self) -> None:
        try:
            raise ValueError("test error")
        except ValueError:
            record = _record("boom", exc_info=sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError" in data["exception"]

    def test_includes_extra_data(self) -> None:
        record = _record()
        record.extra_data = {"articles": 3}  # type: ignore[attr-defined]
        data = json.loads(JSONFormatter().format(record))
        assert data["data"] == {"articles": 3}

    def test_component_is_relative_to_package(self) -> None:
        data = json.loads(JSONFormatter().format(_record()))
        assert data["component"] == "pipeline.worker"

    def test_empty_extra_data_is_omitted(self) -> None:
        record = _record()
        record.extra_data = {}  # type: ignore[attr-defined]
        assert "data" not in json.loads(JSONFormatter().format(record))

    def test_no_extra_data_key_when_absent(self) -> None:
        data = json.loads(JSONFormatter().format(_record()))
        assert "data" not in data
        assert "exception" not in data


@pytest.mark.usefixtures("restore_root")
class TestSetupLogging:
    def test_structured_configures_root_logger(self) -> None:
        setup_structured_logging()
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_plain_mode_uses_text_formatter(self) -> None:
        setup_logging(structured=False, level=logging.DEBUG)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_structured_mode_writes_file_from_worker_thread(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "headlines.jsonl"
        setup_logging(structured=True, log_file=log_file)

        worker = threading.Thread(
            target=lambda: logging.getLogger("headlines.test").info("from worker"), name="feed-worker"
        )
        worker.start()
        worker.join()
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert lines[-1]["message"] == "from worker"
        assert lines[-1]["thread"] == "feed-worker"
