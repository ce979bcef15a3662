#!/usr/bin/env python3
# psscript/builder.py
from __future__ import annotations

import os
from typing import TYPE_CHECKING, Optional, Union

from .executable import Executable
from .script import PsScript

if TYPE_CHECKING:  # pragma: no cover
    from .config import ScriptConfig


class PsScriptBuilder:
    """
    Fluent builder for PsScript.

    Every flag starts off and the executable defaults to the platform's own
    PowerShell (Windows PowerShell on Windows, pwsh elsewhere).

    Example:
        script = PsScriptBuilder().no_profile(True).non_interactive(True).build()
        output = script.run("Get-Date")
    """

    def __init__(self) -> None:
        self._no_profile = False
        self._non_interactive = False
        self._hidden = False
        self._print_commands = False
        self._executable = Executable.default()
        self._executable_path: Optional[str] = None

    @classmethod
    def from_config(cls, config: "ScriptConfig") -> "PsScriptBuilder":
        """Seed a builder from a loaded ScriptConfig."""
        builder = (
            cls()
            .no_profile(config.no_profile)
            .non_interactive(config.non_interactive)
            .hidden(config.hidden)
            .print_commands(config.print_commands)
        )
        if config.executable is not None:
            builder.executable(config.executable)
        if config.executable_path is not None:
            builder.executable_path(config.executable_path)
        return builder

    def no_profile(self, flag: bool) -> "PsScriptBuilder":
        """Do not load PowerShell profiles (-NoProfile)."""
        self._no_profile = bool(flag)
        return self

    def non_interactive(self, flag: bool) -> "PsScriptBuilder":
        """Do not present an interactive prompt to the user (-NonInteractive)."""
        self._non_interactive = bool(flag)
        return self

    def hidden(self, flag: bool) -> "PsScriptBuilder":
        """
        Hide the PowerShell window (-WindowStyle Hidden plus CREATE_NO_WINDOW).

        On any platform other than Windows this is a no-op.
        """
        self._hidden = bool(flag)
        return self

    def print_commands(self, flag: bool) -> "PsScriptBuilder":
        """Print each command to stdout as it is sent. Handy when debugging."""
        self._print_commands = bool(flag)
        return self

    def executable(self, kind: Union[Executable, str]) -> "PsScriptBuilder":
        self._executable = Executable.coerce(kind)
        return self

    def executable_path(self, path: Union[str, "os.PathLike[str]", None]) -> "PsScriptBuilder":
        """Use this interpreter binary instead of searching PATH."""
        self._executable_path = None if path is None else os.fspath(path)
        return self

    def build(self) -> PsScript:
        return PsScript(
            no_profile=self._no_profile,
            non_interactive=self._non_interactive,
            hidden=self._hidden,
            print_commands=self._print_commands,
            executable=self._executable,
            executable_path=self._executable_path,
        )
