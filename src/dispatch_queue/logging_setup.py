# src/dispatch_queue/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import get_settings

LOG_FILE_NAME = "dispatch.log"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow dispatch_queue logs
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    - suppress third-party noise unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "dispatch_queue" or name.startswith("dispatch_queue."):
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path | None = None,
    console_level: int | None = None,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure root logging for an application embedding dispatch_queue:
    - Console handler: filtered, level from DISPATCH_LOG_LEVEL by default
    - File handler (only when a log dir is given or DISPATCH_LOG_DIR is set)

    The library itself never calls this. Call it ONCE, early.
    """
    settings = get_settings()

    if console_level is None:
        console_level = getattr(logging, settings.log_level, logging.INFO)
    if log_dir is None:
        log_dir = settings.log_dir

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / LOG_FILE_NAME), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
