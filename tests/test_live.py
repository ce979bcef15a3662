"""Smoke tests against a real PowerShell; skipped when none is installed."""

from __future__ import annotations

import pytest

import psscript
from psscript import PsScriptBuilder

from .conftest import real_powershell_available

pytestmark = pytest.mark.skipif(
    not real_powershell_available(), reason="PowerShell is not installed"
)


def test_hello_world() -> None:
    output = psscript.run('echo "hello world"')
    assert output.success is True
    assert "hello world" in output.stdout()


def test_exit_code_is_data() -> None:
    output = psscript.run("exit 1")
    assert output.success is False


def test_empty_script() -> None:
    assert psscript.run("").success is True


def test_state_persists_between_lines() -> None:
    script = PsScriptBuilder().no_profile(True).non_interactive(True).build()
    output = script.run("$greeting = 'hi there'\nWrite-Output $greeting")
    assert "hi there" in output.stdout()
