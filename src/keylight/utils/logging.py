from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

DEFAULT_LEVEL = "WARNING"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"
FILE_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(message)s"

NOISY_LOGGERS = ("httpx", "httpcore", "zeroconf")


def suppress_logger(name: str, level: LogLevel = "WARNING") -> None:
    """Suppress a noisy library logger."""
    logging.getLogger(name).setLevel(level)


def setup_logging(level: str | None = None, log_file: Path | None = None) -> None:
    resolved = (level or os.environ.get("LOGLEVEL", DEFAULT_LEVEL)).upper()

    coloredlogs.install(
        level=resolved,
        fmt=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    for name in NOISY_LOGGERS:
        suppress_logger(name)

    if log_file is not None:
        add_file_handler(log_file)


def add_file_handler(path: Path) -> None:
    """Also write DEBUG records to ``path``; console handlers keep their level."""
    path.parent.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    target = str(path.resolve())
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def console_handlers() -> list[logging.Handler]:
    return [
        handler
        for handler in logging.getLogger().handlers
        if not isinstance(handler, logging.FileHandler)
    ]
