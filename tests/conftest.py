"""
Shared pytest fixtures for psscript tests.

Provides a fake `pwsh` interpreter so execution paths can be exercised
without PowerShell installed. The fake understands a handful of commands:

    echo TEXT / Write-Output TEXT   print TEXT (surrounding quotes removed)
    Write-Error TEXT                print TEXT to stderr
    exit N                          exit with status N
    emit-bytes HEX                  write raw bytes to stdout
    emit-err-bytes HEX              write raw bytes to stderr
    flood N                         write N bytes to stdout
    kill-self                       die by SIGKILL

Every invocation appends {"argv": [...], "lines": [...]} to a JSONL log.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from psscript import Executable, executable_name

FAKE_PWSH_SOURCE = r'''
import json
import os
import signal
import sys

lines = []


def record():
    log = os.environ.get("FAKE_PWSH_LOG")
    if log:
        with open(log, "a", encoding="utf-8") as f:
            f.write(json.dumps({"argv": sys.argv[1:], "lines": lines}) + "\n")


def unquote(text):
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


for raw in sys.stdin.buffer:
    line = raw.decode("utf-8").rstrip("\n")
    lines.append(line)
    cmd, _, rest = line.strip().partition(" ")
    if cmd in ("echo", "Write-Output"):
        sys.stdout.write(unquote(rest) + "\n")
    elif cmd == "Write-Error":
        sys.stderr.write(unquote(rest) + "\n")
    elif cmd == "exit":
        sys.stdout.flush()
        record()
        sys.exit(int(rest or 0))
    elif cmd == "emit-bytes":
        sys.stdout.flush()
        sys.stdout.buffer.write(bytes.fromhex(rest))
    elif cmd == "emit-err-bytes":
        sys.stderr.flush()
        sys.stderr.buffer.write(bytes.fromhex(rest))
    elif cmd == "flood":
        sys.stdout.flush()
        sys.stdout.buffer.write(b"x" * int(rest))
    elif cmd == "kill-self":
        sys.stdout.flush()
        record()
        os.kill(os.getpid(), signal.SIGKILL)

sys.stdout.flush()
record()
'''


@dataclass
class FakePwsh:
    path: Path
    log_path: Path

    def calls(self) -> list[dict[str, Any]]:
        if not self.log_path.exists():
            return []
        return [json.loads(line) for line in self.log_path.read_text(encoding="utf-8").splitlines()]

    def last_call(self) -> dict[str, Any]:
        calls = self.calls()
        assert calls, "fake pwsh was never invoked"
        return calls[-1]


@pytest.fixture
def fake_pwsh(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakePwsh:
    """Put a fake `pwsh` first on PATH (POSIX only)."""
    if os.name == "nt":
        pytest.skip("fake interpreter relies on a POSIX shell wrapper")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    source = tmp_path / "fake_pwsh.py"
    source.write_text(FAKE_PWSH_SOURCE, encoding="utf-8")

    # /bin/sh wrapper keeps the shebang short whatever the interpreter path is
    exe = bin_dir / "pwsh"
    exe.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{source}" "$@"\n', encoding="utf-8")
    exe.chmod(0o755)

    log_path = tmp_path / "pwsh-calls.jsonl"
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("FAKE_PWSH_LOG", str(log_path))
    return FakePwsh(path=exe, log_path=log_path)


@pytest.fixture
def empty_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A PATH containing only an empty directory."""
    empty = tmp_path / "empty-bin"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    monkeypatch.delenv("SYSTEMROOT", raising=False)
    return empty


def real_powershell_available() -> bool:
    return shutil.which(executable_name(Executable.default())) is not None


@pytest.fixture(autouse=True)
def _reset_psscript_logger() -> Any:
    """init_logger() attaches handlers bound to the current stderr; drop them after each test."""
    logger = logging.getLogger("psscript")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate
