#!/usr/bin/env python3
# psscript/ui/logging.py
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from .ansi import ANSI, strip_ansi, supports_ansi
from .console import PRINT_MUTEX


class ColorizingStreamHandler(logging.StreamHandler):
    """
    StreamHandler that colours records by level when the console supports
    ANSI and writes plain text otherwise.
    """

    _LEVEL_COLORS = {
        logging.DEBUG: ANSI["bright_black"],
        logging.INFO: "",
        logging.WARNING: ANSI["yellow"],
        logging.ERROR: ANSI["red"],
        logging.CRITICAL: ANSI["magenta"],
    }

    def __init__(self, stream=None) -> None:
        super().__init__(stream)
        self._use_ansi = supports_ansi(self.stream)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if self._use_ansi:
                color = self._LEVEL_COLORS.get(record.levelno, "")
                if color:
                    message = f"{color}{message}{ANSI['reset']}"
            else:
                message = strip_ansi(message)
            with PRINT_MUTEX:
                self.stream.write(message + self.terminator)
                self.flush()
        except Exception:
            self.handleError(record)


class PlainFormatter(logging.Formatter):
    """Formatter that strips ANSI (good for log files)."""

    def format(self, record: logging.LogRecord) -> str:
        return strip_ansi(super().format(record))


def init_logger(
    name: str = "psscript",
    level: int = logging.WARNING,
    logfile: Optional[str] = None,
) -> logging.Logger:
    """
    Attach console (and optionally rotating file) handlers to a logger.

    Console: stderr, ANSI level colours when available.
    File: rotating, plain text, UTF-8, always at DEBUG.
    Calling it again only adjusts levels; handlers are never duplicated.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if logfile else level)
    logger.propagate = False

    console = next((h for h in logger.handlers if isinstance(h, ColorizingStreamHandler)), None)
    if console is None:
        console = ColorizingStreamHandler(stream=sys.stderr)
        console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console)
    console.setLevel(level)

    if logfile and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(
            logfile, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            PlainFormatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger
