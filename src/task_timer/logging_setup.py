# src/task_timer/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Ten records a second per running card; only the log file needs them.
_TICK_LOGGER = "task_timer.timers.tick_driver"


class _ConsoleNoiseFilter(logging.Filter):
    """Console gets our own logs minus tick chatter; everyone else only on ERROR."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == _TICK_LOGGER:
            return record.levelno >= logging.WARNING
        if record.name.startswith("task_timer."):
            return True
        return record.levelno >= logging.ERROR


def _attach(root: logging.Logger, handler: logging.Handler, level: int, fmt: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(fmt)
    root.addHandler(handler)


def setup_logging(
    *,
    log_dir: str | Path = ".local/task_timer",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a full `task_timer.log` file handler.

    Replaces whatever handlers the root logger had. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "task_timer.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.addFilter(_ConsoleNoiseFilter())
    _attach(root, console, console_level, fmt)
    _attach(root, logging.FileHandler(str(log_file), encoding="utf-8"), file_level, fmt)

    logging.captureWarnings(True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    return log_file
