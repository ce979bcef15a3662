#!/usr/bin/env python3
# psscript/script.py
"""
Execution of a script through a PowerShell child process.

Each call spawns exactly one interpreter with `-Command -`, writes the
script to its stdin one line at a time and collects everything it prints.
Nothing is cached between calls, so a PsScript can be shared across threads.

Notes:
    - Each line is sent as its own command; statements spanning several
      lines (here-strings, multi-line blocks) are not supported.
    - There is no timeout. Wrap the call yourself if a script may hang.
"""

from __future__ import annotations

import contextlib
import logging
import os
import subprocess
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import IO, List, Optional, Tuple

from .errors import ChildStdinNotFoundError, ProcessIoError, ScriptEncodeError, SpawnError
from .executable import WINDOWS, Executable, locate
from .output import PsOutput
from .ui import print_line

log = logging.getLogger(__name__)

# Creation flag that keeps a console window from flashing up on Windows.
_CREATE_NO_WINDOW = 0x08000000


def split_commands(script: str) -> List[str]:
    """Split script text into command lines, dropping blank ones."""
    commands: List[str] = []
    for raw in script.split("\n"):
        line = raw.rstrip("\r")
        if line.strip():
            commands.append(line)
    return commands


@dataclass(frozen=True, slots=True)
class PsScript:
    """
    Immutable run configuration, normally produced by PsScriptBuilder.

    Attributes:
        no_profile: Pass -NoProfile so user profiles are not loaded.
        non_interactive: Pass -NonInteractive (no prompts).
        hidden: Pass -WindowStyle Hidden and suppress the console window
            (Windows only; a no-op elsewhere).
        print_commands: Echo every command to our stdout before sending it.
        executable: Which PowerShell to run; Core is used on non-Windows hosts.
        executable_path: Explicit interpreter path; skips the PATH lookup.
    """
    no_profile: bool = False
    non_interactive: bool = False
    hidden: bool = False
    print_commands: bool = False
    executable: Executable = field(default_factory=Executable.default)
    executable_path: Optional[str] = None

    # ---- Argument construction ---------------------------------------------

    def arguments(self, host_os: str = os.name) -> List[str]:
        """Interpreter flags, without the program itself."""
        args: List[str] = []
        if self.no_profile:
            args.append("-NoProfile")
        if self.non_interactive:
            args.append("-NonInteractive")
        if self.hidden and host_os == WINDOWS:
            args.extend(["-WindowStyle", "Hidden"])
        # read commands from stdin
        args.extend(["-Command", "-"])
        return args

    def program(self) -> str:
        return self.executable_path or locate(self.executable)

    # ---- Runners ------------------------------------------------------------

    def run(self, script: str) -> PsOutput:
        """
        Run `script` and return its captured output.

        A script that fails still returns a PsOutput (check `.success`).

        Raises:
            SpawnError: PowerShell is missing or could not be started.
            ProcessIoError: a pipe to the child failed after it started.
            ScriptEncodeError: a command cannot be encoded as UTF-8; raised
                before the interpreter is started.
        """
        completed, duration = self._execute(script)
        return PsOutput.from_completed(completed, duration_sec=duration)

    def run_raw(self, script: str) -> subprocess.CompletedProcess:
        """Like run(), but returns the bytes-mode subprocess.CompletedProcess."""
        completed, _ = self._execute(script)
        return completed

    # ---- Internals ----------------------------------------------------------

    def _execute(self, script: str) -> Tuple[subprocess.CompletedProcess, float]:
        commands = split_commands(script)
        payloads = _encode_commands(commands)
        args = [self.program(), *self.arguments()]
        creationflags = _CREATE_NO_WINDOW if (self.hidden and os.name == WINDOWS) else 0

        log.debug("spawning %s (%d commands)", subprocess.list2cmdline(args), len(commands))
        start = time.perf_counter()
        try:
            proc = subprocess.Popen(
                args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                creationflags=creationflags,
            )
        except OSError as exc:
            log.error("failed to start %s: %s", args[0], exc)
            raise SpawnError(f"Failed to start {args[0]}: {exc}") from exc

        with proc:
            stdout, stderr = self._communicate(proc, commands, payloads)

        duration = time.perf_counter() - start
        log.debug("%s exited with %s after %.3fs", args[0], proc.returncode, duration)
        return subprocess.CompletedProcess(args, proc.returncode, stdout, stderr), duration

    def _communicate(
        self, proc: subprocess.Popen, commands: List[str], payloads: List[bytes]
    ) -> Tuple[bytes, bytes]:
        """
        Write commands while two workers drain stdout/stderr, so a chatty
        child can never block on a full pipe while we are still writing.
        The child is killed and reaped on any failure.
        """
        if proc.stdin is None:
            proc.kill()
            raise ChildStdinNotFoundError()

        pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="psscript-reader")
        try:
            out_future = pool.submit(_drain, proc.stdout)
            err_future = pool.submit(_drain, proc.stderr)
            try:
                for line, payload in zip(commands, payloads):
                    if self.print_commands:
                        print_line(line)
                    proc.stdin.write(payload)
                    proc.stdin.flush()
                proc.stdin.close()
            except OSError as exc:
                log.error("failed to write to PowerShell stdin: %s", exc)
                raise ProcessIoError(f"Failed to write to PowerShell stdin: {exc}") from exc

            try:
                proc.wait()
            except OSError as exc:
                raise ProcessIoError(f"Failed to wait for PowerShell: {exc}") from exc
            return _result(out_future, "stdout"), _result(err_future, "stderr")
        except BaseException:
            proc.kill()
            # stdin may still hold unflushed bytes for the dead child
            with contextlib.suppress(OSError):
                proc.stdin.close()
            raise
        finally:
            pool.shutdown(wait=True)


def _encode_commands(commands: List[str]) -> List[bytes]:
    """Encode every command up front so a bad line fails before anything is spawned."""
    payloads: List[bytes] = []
    for number, line in enumerate(commands, start=1):
        try:
            payloads.append(line.encode("utf-8") + b"\n")
        except UnicodeEncodeError as exc:
            raise ScriptEncodeError(number, exc) from exc
    return payloads


def _drain(stream: Optional[IO[bytes]]) -> bytes:
    if stream is None:
        return b""
    return stream.read()


def _result(future: Future, name: str) -> bytes:
    try:
        return future.result()
    except OSError as exc:
        log.error("failed to read PowerShell %s: %s", name, exc)
        raise ProcessIoError(f"Failed to read PowerShell {name}: {exc}") from exc
