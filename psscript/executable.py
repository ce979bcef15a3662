#!/usr/bin/env python3
# psscript/executable.py
"""
Interpreter selection.

Which binary to run is a pure function of (configured kind, host OS):
Windows PowerShell only exists on Windows, so every other host runs
PowerShell Core whatever was configured. Locating the binary on disk is
kept separate in `locate`.
"""

from __future__ import annotations

import enum
import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

from .errors import PowershellNotFoundError

log = logging.getLogger(__name__)

WINDOWS = "nt"


class Executable(enum.Enum):
    SYSTEM = "system"   # Windows PowerShell 5.x, ships with Windows
    CORE = "core"       # PowerShell 7+ (pwsh)

    @classmethod
    def default(cls, host_os: str = os.name) -> "Executable":
        return cls.SYSTEM if host_os == WINDOWS else cls.CORE

    @classmethod
    def coerce(cls, value: Union["Executable", str]) -> "Executable":
        """Accept an Executable or its name/value ('core', 'SYSTEM', ...)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise ValueError(f"executable must be one of {[m.value for m in cls]}, got {value!r}")


def resolve_kind(kind: Executable, host_os: str = os.name) -> Executable:
    if host_os != WINDOWS:
        return Executable.CORE
    return kind


def executable_name(kind: Executable, host_os: str = os.name) -> str:
    kind = resolve_kind(kind, host_os)
    if kind is Executable.SYSTEM:
        return "powershell.exe"
    return "pwsh.exe" if host_os == WINDOWS else "pwsh"


def locate(
    kind: Executable,
    host_os: str = os.name,
    env: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Return the full path of the interpreter for `kind` on this host.

    Searches PATH first. For Windows PowerShell, falls back to its default
    install location under %SYSTEMROOT%, since cmd.exe hosts do not always
    have it on PATH.

    Raises:
        PowershellNotFoundError: nothing usable was found.
    """
    env = os.environ if env is None else env
    name = executable_name(kind, host_os)

    found = _which(name, env, host_os)
    if found:
        return found

    if resolve_kind(kind, host_os) is Executable.SYSTEM:
        system_root = env.get("SYSTEMROOT")
        if system_root:
            candidate = Path(system_root) / "System32" / "WindowsPowerShell" / "v1.0" / "powershell.exe"
            if candidate.is_file():
                return str(candidate)

    log.debug("%s not found on PATH", name)
    raise PowershellNotFoundError(name)


def _which(executable: str, env: Mapping[str, str], host_os: str) -> Optional[str]:
    """Minimal 'which' that honours PATHEXT on Windows and the exec bit elsewhere."""
    sep = ";" if host_os == WINDOWS else ":"
    paths = [p for p in env.get("PATH", "").split(sep) if p]
    exts = env.get("PATHEXT", ".EXE;.BAT;.CMD").split(";") if host_os == WINDOWS else []
    for p in paths:
        full = os.path.join(p, executable)
        if os.path.isfile(full) and (host_os == WINDOWS or os.access(full, os.X_OK)):
            return full
        # PATHEXT variants when the name carries no extension
        if "." not in os.path.basename(executable):
            for ext in exts:
                if os.path.isfile(full + ext):
                    return full + ext
    return None
