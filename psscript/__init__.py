#!/usr/bin/env python3
# psscript/__init__.py
"""
Run PowerShell scripts from Python.

Each line of a script is piped to a PowerShell child process as one command;
the result comes back as a PsOutput carrying the exit status and captured
stdout/stderr.

    >>> import psscript
    >>> out = psscript.run('echo "hello world"')
    >>> out.success, out.stdout()
    (True, 'hello world\\n')

Configure the invocation with PsScriptBuilder:

    >>> script = psscript.PsScriptBuilder().no_profile(True).print_commands(True).build()
    >>> script.run("Get-Date")

On Windows the PowerShell that ships with the OS is used by default; pick
PowerShell Core with `.executable(Executable.CORE)`. Every other OS always
runs `pwsh`.
"""

from __future__ import annotations

import logging

from .builder import PsScriptBuilder
from .config import ScriptConfig, load_config
from .errors import (
    ChildStdinNotFoundError,
    PowershellError,
    PowershellNotFoundError,
    ProcessIoError,
    PsError,
    ScriptEncodeError,
    SpawnError,
    Utf8DecodeError,
)
from .executable import Executable, executable_name, locate, resolve_kind
from .output import ExitStatus, PsOutput
from .script import PsScript, split_commands

__version__ = "2.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def run(script: str) -> PsOutput:
    """Run `script` with the default configuration. See PsScript.run."""
    return PsScriptBuilder().build().run(script)


__all__ = [
    "run",
    "PsScriptBuilder",
    "PsScript",
    "PsOutput",
    "ExitStatus",
    "Executable",
    "ScriptConfig",
    "load_config",
    "executable_name",
    "locate",
    "resolve_kind",
    "split_commands",
    "PsError",
    "SpawnError",
    "PowershellNotFoundError",
    "ProcessIoError",
    "ChildStdinNotFoundError",
    "Utf8DecodeError",
    "ScriptEncodeError",
    "PowershellError",
]
