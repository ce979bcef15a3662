"""Tests for PsScriptBuilder and PsScript argument construction."""

from __future__ import annotations

from pathlib import Path

import pytest

from psscript import Executable, PsScript, PsScriptBuilder, ScriptConfig


class TestDefaults:
    def test_all_flags_off(self) -> None:
        script = PsScriptBuilder().build()
        assert script.no_profile is False
        assert script.non_interactive is False
        assert script.hidden is False
        assert script.print_commands is False
        assert script.executable is Executable.default()
        assert script.executable_path is None

    def test_matches_plain_psscript(self) -> None:
        assert PsScriptBuilder().build() == PsScript()


class TestSetters:
    def test_chaining_sets_every_flag(self) -> None:
        script = (
            PsScriptBuilder()
            .no_profile(True)
            .non_interactive(True)
            .hidden(True)
            .print_commands(True)
            .executable(Executable.CORE)
            .build()
        )
        assert script == PsScript(
            no_profile=True,
            non_interactive=True,
            hidden=True,
            print_commands=True,
            executable=Executable.CORE,
        )

    def test_last_setter_wins(self) -> None:
        script = PsScriptBuilder().no_profile(True).no_profile(False).build()
        assert script.no_profile is False

    def test_executable_accepts_string(self) -> None:
        assert PsScriptBuilder().executable("system").build().executable is Executable.SYSTEM

    def test_executable_path_accepts_pathlike(self, tmp_path: Path) -> None:
        script = PsScriptBuilder().executable_path(tmp_path / "pwsh").build()
        assert script.executable_path == str(tmp_path / "pwsh")

    def test_built_script_is_independent_of_builder(self) -> None:
        builder = PsScriptBuilder().hidden(True)
        script = builder.build()
        builder.hidden(False)
        assert script.hidden is True

    def test_script_is_frozen(self) -> None:
        script = PsScriptBuilder().build()
        with pytest.raises(AttributeError):
            script.hidden = True  # type: ignore[misc]


class TestFromConfig:
    def test_copies_flags(self) -> None:
        config = ScriptConfig(
            no_profile=True,
            print_commands=True,
            executable=Executable.CORE,
            executable_path="/opt/pwsh/pwsh",
        )
        script = PsScriptBuilder.from_config(config).build()
        assert script.no_profile is True
        assert script.non_interactive is False
        assert script.print_commands is True
        assert script.executable is Executable.CORE
        assert script.executable_path == "/opt/pwsh/pwsh"

    def test_empty_config_is_default(self) -> None:
        assert PsScriptBuilder.from_config(ScriptConfig()).build() == PsScriptBuilder().build()


class TestArguments:
    def test_default_only_reads_stdin(self) -> None:
        assert PsScript().arguments("posix") == ["-Command", "-"]

    def test_flag_order(self) -> None:
        script = PsScript(no_profile=True, non_interactive=True, hidden=True)
        assert script.arguments("nt") == [
            "-NoProfile",
            "-NonInteractive",
            "-WindowStyle",
            "Hidden",
            "-Command",
            "-",
        ]

    def test_hidden_is_noop_off_windows(self) -> None:
        script = PsScript(hidden=True)
        assert script.arguments("posix") == ["-Command", "-"]

    def test_print_commands_adds_no_flag(self) -> None:
        assert PsScript(print_commands=True).arguments("nt") == ["-Command", "-"]

    def test_explicit_path_skips_lookup(self) -> None:
        assert PsScript(executable_path="/x/pwsh").program() == "/x/pwsh"
