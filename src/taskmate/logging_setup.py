# src/taskmate/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "taskmate.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Minimum level a third-party logger needs to reach the console.
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "werkzeug": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "py.warnings": logging.ERROR,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keeps the REPL readable while the board talks to the API:
    taskmate.* always passes, request logs of the HTTP stack only from
    WARNING, everything else from ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == "taskmate" or name.startswith("taskmate."):
            return True

        threshold = _CONSOLE_THRESHOLDS.get(name)
        if threshold is None:
            threshold = _CONSOLE_THRESHOLDS.get(name.split(".", 1)[0], logging.ERROR)
        return record.levelno >= threshold


def _console_handler(level: int, fmt: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_ConsoleNoiseFilter())
    return handler


def _file_handler(path: Path, level: int, fmt: logging.Formatter) -> logging.Handler:
    # Server logs every request at DEBUG; keep the file bounded.
    handler = RotatingFileHandler(str(path), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskmate",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logging to a filtered stderr console and a rotating file in
    `log_dir`. Replaces whatever root handlers were installed before, so it
    is meant to be called once from the entrypoint. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for old in list(root.handlers):
        root.removeHandler(old)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    root.addHandler(_console_handler(console_level, fmt))
    root.addHandler(_file_handler(log_file, file_level, fmt))

    logging.captureWarnings(True)

    # httpcore logs every socket event at DEBUG.
    for name in ("werkzeug", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.INFO)

    return log_file
