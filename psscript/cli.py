#!/usr/bin/env python3
# psscript/cli.py
"""
Command-line runner: `psscript [SCRIPT] [options]` or `python -m psscript`.

Precedence (low -> high): builder defaults, --config file, CLI flags.
Exit code mirrors PowerShell's; 2 means psscript itself failed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .builder import PsScriptBuilder
from .config import ScriptConfig, load_config
from .errors import PsError
from .executable import Executable
from .ui import colorize, init_logger, print_line, supports_ansi

EXIT_INTERNAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psscript",
        description="Pipe a script into PowerShell, one command per line.",
    )
    parser.add_argument(
        "script", nargs="?", default="-",
        help="script file to run ('-' or omitted reads stdin)",
    )
    # BooleanOptionalAction adds --no-<flag>; None means "leave the config value alone"
    parser.add_argument("--no-profile", action=argparse.BooleanOptionalAction, default=None,
                        help="do not load PowerShell profiles")
    parser.add_argument("--non-interactive", action=argparse.BooleanOptionalAction, default=None,
                        help="never prompt the user")
    parser.add_argument("--hidden", action=argparse.BooleanOptionalAction, default=None,
                        help="hide the PowerShell window (Windows only)")
    parser.add_argument("--print-commands", action=argparse.BooleanOptionalAction, default=None,
                        help="echo each command before it is sent")
    kind = parser.add_mutually_exclusive_group()
    kind.add_argument("--core", dest="executable", action="store_const", const=Executable.CORE,
                      help="use PowerShell Core (pwsh)")
    kind.add_argument("--system", dest="executable", action="store_const", const=Executable.SYSTEM,
                      help="use Windows PowerShell (Windows only)")
    parser.add_argument("--executable", dest="executable_path", metavar="PATH",
                        help="explicit interpreter binary")
    parser.add_argument("--config", metavar="FILE",
                        help="load defaults from a .toml/.ini/.json/.env file")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log more (-v info, -vv debug)")
    parser.add_argument("--log-file", metavar="FILE", help="also log to a rotating file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _read_script(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    # utf-8-sig: editors on Windows like to prepend a BOM to .ps1 files
    return Path(source).read_text(encoding="utf-8-sig")


def _builder_for(ns: argparse.Namespace, config: ScriptConfig) -> PsScriptBuilder:
    builder = PsScriptBuilder.from_config(config)
    if ns.no_profile is not None:
        builder.no_profile(ns.no_profile)
    if ns.non_interactive is not None:
        builder.non_interactive(ns.non_interactive)
    if ns.hidden is not None:
        builder.hidden(ns.hidden)
    if ns.print_commands is not None:
        builder.print_commands(ns.print_commands)
    if ns.executable is not None:
        builder.executable(ns.executable)
    if ns.executable_path:
        builder.executable_path(ns.executable_path)
    return builder


def _log_level(verbose: int, configured: Optional[str]) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return getattr(logging, configured) if configured else logging.WARNING


def _fail(message: str) -> int:
    text = f"[ERROR] {message}"
    if supports_ansi(sys.stderr):
        text = colorize(text, "red")
    print_line(text, file=sys.stderr)
    return EXIT_INTERNAL


def main(argv: Optional[Sequence[str]] = None) -> int:
    ns = build_parser().parse_args(argv)

    try:
        config = load_config(ns.config) if ns.config else ScriptConfig()
    except (OSError, ValueError) as exc:
        return _fail(f"Invalid configuration: {exc}")

    log_file = ns.log_file or (str(config.log_file) if config.log_file else None)
    logger = init_logger("psscript", level=_log_level(ns.verbose, config.log_level), logfile=log_file)

    try:
        text = _read_script(ns.script)
    except (OSError, UnicodeDecodeError) as exc:
        return _fail(f"Cannot read script {ns.script}: {exc}")

    script = _builder_for(ns, config).build()
    try:
        output = script.run(text)
    except PsError as exc:
        return _fail(str(exc))

    sys.stdout.buffer.write(output.raw_stdout)
    sys.stdout.flush()
    sys.stderr.buffer.write(output.raw_stderr)
    sys.stderr.flush()

    logger.info("PowerShell finished (%s) in %.2fs", output.status, output.duration_sec)
    if output.success:
        return 0
    return output.returncode if output.returncode else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
