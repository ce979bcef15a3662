#!/usr/bin/env python3
# psscript/errors.py
"""
Exception taxonomy.

- SpawnError: the interpreter could not be found or started.
- ProcessIoError: a pipe to or from a running child failed.
- Utf8DecodeError: captured output is not valid UTF-8.
- ScriptEncodeError: a command line cannot be encoded as UTF-8.
- PowershellError: opt-in, raised by PsOutput.check() for a failed script.

A non-zero exit code is never raised by run(); it is reported on PsOutput.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .output import PsOutput


class PsError(Exception):
    """Base class for every error raised by psscript."""

    kind: str = "ps"


class SpawnError(PsError):
    """The interpreter executable could not be located or launched."""

    kind = "spawn"


class PowershellNotFoundError(SpawnError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Failed to find {name} on this system")
        self.name = name


class ProcessIoError(PsError):
    """Writing to, reading from or waiting on the child process failed."""

    kind = "io"


class ChildStdinNotFoundError(ProcessIoError):
    def __init__(self) -> None:
        super().__init__("Failed to acquire a handle to stdin in the child process.")


class Utf8DecodeError(PsError, ValueError):
    """Captured bytes could not be decoded as UTF-8."""

    kind = "utf8"

    def __init__(self, stream: str, exc: UnicodeDecodeError) -> None:
        super().__init__(f"{stream} is not valid UTF-8: {exc.reason} at byte {exc.start}")
        self.stream = stream
        self.start = exc.start


class ScriptEncodeError(PsError, ValueError):
    """A command (e.g. one holding a lone surrogate) cannot be sent as UTF-8."""

    kind = "utf8"

    def __init__(self, line: int, exc: UnicodeEncodeError) -> None:
        super().__init__(f"command {line} is not encodable as UTF-8: {exc.reason} at position {exc.start}")
        self.line = line
        self.start = exc.start


class PowershellError(PsError):
    """The script ran but PowerShell reported failure."""

    kind = "powershell"

    def __init__(self, output: "PsOutput") -> None:
        super().__init__(str(output))
        self.output = output
