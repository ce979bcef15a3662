#!/usr/bin/env python3
# psscript/ui/console.py
from __future__ import annotations

import sys
import threading
from typing import IO, Optional

# Shared by command echoing and the console log handler so lines never interleave.
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file: Optional[IO[str]] = None, flush: bool = True) -> None:
    """Thread-safe single-line print."""
    stream = file if file is not None else sys.stdout
    with PRINT_MUTEX:
        stream.write(f"{text}\n")
        if flush:
            stream.flush()
