#!/usr/bin/env python3
# psscript/ui/__init__.py
from __future__ import annotations
from .ansi import ANSI, colorize, enable_windows_vt, strip_ansi, supports_ansi
from .console import PRINT_MUTEX, print_line
from .logging import ColorizingStreamHandler, PlainFormatter, init_logger

__all__ = [
    "ANSI",
    "colorize",
    "enable_windows_vt",
    "strip_ansi",
    "supports_ansi",
    "PRINT_MUTEX",
    "print_line",
    "ColorizingStreamHandler",
    "PlainFormatter",
    "init_logger",
]
