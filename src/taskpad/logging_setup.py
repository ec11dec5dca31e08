# src/taskpad/logging_setup.py

from __future__ import annotations

"""
Logging for the console client.

The console shares the terminal with the task form, so it only shows what an
operator can act on. Everything, including raw server error bodies, goes to
`<data_dir>/taskpad.log`.

Log calls that include a server response body pass `extra=SERVER_DETAIL`;
such records are written to the file and never to the console.
"""

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskpad.log"

SERVER_DETAIL = {"server_detail": True}

# Longest matching prefix wins.
_CONSOLE_MIN_LEVELS: tuple[tuple[str, int], ...] = (
    ("taskpad.api.", logging.WARNING),
    ("taskpad.forms.", logging.INFO),
    ("taskpad.", logging.NOTSET),
    ("py.warnings", logging.ERROR),
)
_THIRD_PARTY_CONSOLE_LEVEL = logging.ERROR

# HTTP libraries log every request at INFO/DEBUG.
_QUIET_LIBRARIES = ("httpx", "httpcore")


def carries_server_detail(record: logging.LogRecord) -> bool:
    return bool(getattr(record, "server_detail", False))


def console_min_level(logger_name: str) -> int:
    best_prefix = ""
    level = _THIRD_PARTY_CONSOLE_LEVEL
    for prefix, min_level in _CONSOLE_MIN_LEVELS:
        if logger_name.startswith(prefix) and len(prefix) > len(best_prefix):
            best_prefix, level = prefix, min_level
    return level


class ConsoleFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if carries_server_detail(record):
            return False
        return record.levelno >= console_min_level(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpad",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """Install the console and file handlers on the root logger. Returns the log file path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(ConsoleFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
