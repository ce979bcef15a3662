#!/usr/bin/env python3
# psscript/output.py
from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .errors import PowershellError, Utf8DecodeError


@dataclass(frozen=True, slots=True)
class ExitStatus:
    """Exit status of a finished child: a code, or the signal that killed it."""
    code: Optional[int]
    signal: Optional[int] = None

    @classmethod
    def from_returncode(cls, returncode: int) -> "ExitStatus":
        # Popen reports "killed by signal N" as -N on POSIX.
        if returncode < 0:
            return cls(code=None, signal=-returncode)
        return cls(code=returncode)

    @property
    def success(self) -> bool:
        return self.code == 0

    def __str__(self) -> str:
        if self.code is None:
            return f"signal: {self.signal}"
        return f"exit code: {self.code}"


@dataclass(frozen=True, slots=True)
class PsOutput:
    """
    Captured result of one PowerShell run.

    Attributes:
        status: Exit status of the interpreter.
        raw_stdout: Bytes written by the child to stdout.
        raw_stderr: Bytes written by the child to stderr.
        args: The argv the interpreter was started with.
        duration_sec: Wall time from spawn to exit.
    """
    status: ExitStatus
    raw_stdout: bytes = b""
    raw_stderr: bytes = b""
    args: tuple[str, ...] = field(default=(), compare=False)
    duration_sec: float = field(default=0.0, compare=False)

    @classmethod
    def from_completed(
        cls,
        completed: subprocess.CompletedProcess,
        duration_sec: float = 0.0,
    ) -> "PsOutput":
        args: Sequence[str] = completed.args if not isinstance(completed.args, str) else [completed.args]
        return cls(
            status=ExitStatus.from_returncode(completed.returncode),
            raw_stdout=completed.stdout or b"",
            raw_stderr=completed.stderr or b"",
            args=tuple(str(a) for a in args),
            duration_sec=duration_sec,
        )

    @property
    def success(self) -> bool:
        return self.status.success

    @property
    def returncode(self) -> Optional[int]:
        return self.status.code

    def stdout(self) -> str:
        """Decode stdout as UTF-8. Raises Utf8DecodeError on invalid bytes."""
        return _decode("stdout", self.raw_stdout)

    def stderr(self) -> str:
        """Decode stderr as UTF-8. Raises Utf8DecodeError on invalid bytes."""
        return _decode("stderr", self.raw_stderr)

    def check(self) -> "PsOutput":
        """Return self, or raise PowershellError if the script failed."""
        if not self.success:
            raise PowershellError(self)
        return self

    def __str__(self) -> str:
        # Display only; use stdout()/stderr() when decoding errors matter.
        out = self.raw_stdout.decode("utf-8", errors="replace")
        err = self.raw_stderr.decode("utf-8", errors="replace")
        return out + err


def _decode(stream: str, data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8DecodeError(stream, exc) from exc
