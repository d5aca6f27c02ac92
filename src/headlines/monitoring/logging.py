"""Logging setup: plain console lines or structured JSON."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"
PACKAGE_PREFIX = "headlines."


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Besides the usual fields each line names the emitting thread (the
    ``feed-worker`` or the presentation loop) and the component, i.e. the
    logger name relative to the package.  Structured context passed as
    ``extra={"extra_data": {...}}``, such as a fetch generation, lands under
    ``data``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": record.name.removeprefix(PACKAGE_PREFIX),
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            log_entry["data"] = extra_data
        return json.dumps(log_entry, default=str)


def setup_structured_logging(
    *,
    log_file: Path | None = None,
    level: int = logging.INFO,
) -> None:
    """Configure the root logger with structured JSON output.

    Args:
        log_file: If provided, also write JSON logs to this file.
        level: Logging level (default INFO).
    """
    _install_handlers(JSONFormatter(), log_file=log_file, level=level)


def setup_logging(*, structured: bool = False, log_file: Path | None = None, level: int = logging.INFO) -> None:
    """Configure the root logger for the CLI."""
    if structured:
        setup_structured_logging(log_file=log_file, level=level)
    else:
        _install_handlers(logging.Formatter(PLAIN_FORMAT), log_file=log_file, level=level)


def _install_handlers(formatter: logging.Formatter, *, log_file: Path | None, level: int) -> None:
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicate output
    root.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file))
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
