#!/usr/bin/env python3
# psscript/config.py
from __future__ import annotations

"""
Configuration loader (stdlib-only).

One explicit file per call; nothing is discovered implicitly and the process
environment is never consulted. Supported formats: .toml, .ini, .json, .env.
Nested tables are flattened, so both of these work:

    # psscript.toml
    [psscript]
    no_profile = true
    executable = "core"

    # .env
    NO_PROFILE=1
    EXECUTABLE=core

Validation:
  - NO_PROFILE / NON_INTERACTIVE / HIDDEN / PRINT_COMMANDS: bool
  - EXECUTABLE: None or one of {'system', 'core'}
  - EXECUTABLE_PATH / LOG_FILE: None or normalized path
  - LOG_LEVEL: None or one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
"""

import configparser
import json
import os
import re
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .executable import Executable

DEFAULTS: dict[str, Any] = {
    "NO_PROFILE": False,
    "NON_INTERACTIVE": False,
    "HIDDEN": False,
    "PRINT_COMMANDS": False,
    "EXECUTABLE": None,             # None -> platform default
    "EXECUTABLE_PATH": None,
    "LOG_LEVEL": None,
    "LOG_FILE": None,
}

# Section name stripped from flattened keys ([psscript] no_profile -> NO_PROFILE).
_SECTION = "PSSCRIPT"


# ---------- data model ----------

@dataclass(frozen=True)
class ScriptConfig:
    no_profile: bool = False
    non_interactive: bool = False
    hidden: bool = False
    print_commands: bool = False
    executable: Executable | None = None
    executable_path: str | None = None
    log_level: str | None = None
    log_file: Path | None = None

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    line_re = re.compile(r"""^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = line_re.match(line)
        if not m:
            continue
        k, v = m.group(1), m.group(2)
        if (v.startswith("'") and v.endswith("'")) or (v.startswith('"') and v.endswith('"')):
            v = v[1:-1]
        out[k] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    cfg = configparser.ConfigParser()
    with path.open(encoding="utf-8") as f:
        cfg.read_file(f)
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError(f"{path}: top-level JSON value must be an object")
    return _flatten_mapping(data)


def _load_toml_file(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return _flatten_mapping(tomllib.load(f))


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'psscript': {'no_profile': true}} -> {'PSSCRIPT_NO_PROFILE': True}
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[str(key).upper()] = v
    return flat


_LOADERS = {
    ".env": _load_env_file,
    ".ini": _load_ini_file,
    ".json": _load_json_file,
    ".toml": _load_toml_file,
}


def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in d.items():
        key = str(k).upper()
        if key.startswith(_SECTION + "_"):
            key = key[len(_SECTION) + 1:]
        out[key] = v
    return out


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(key: str, val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ValueError(f"{key}: expected boolean, got {val!r}")


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_log_level(val: Any) -> str | None:
    lv = _as_opt_str(val)
    if lv is None:
        return None
    up = lv.upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if up not in allowed:
        raise ValueError(f"LOG_LEVEL must be one of {sorted(allowed)}, got {lv!r}")
    return up


def _as_executable(val: Any) -> Executable | None:
    s = _as_opt_str(val)
    if s is None:
        return None
    try:
        return Executable.coerce(s)
    except ValueError as exc:
        raise ValueError(f"EXECUTABLE: {exc}") from exc


def _as_opt_path(val: Any, base: Path) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    p = Path(os.path.expanduser(v))
    return p if p.is_absolute() else (base / p).resolve()


# ---------- validation ----------

def _validate_and_build(config: Mapping[str, Any], base: Path) -> ScriptConfig:
    exe_path = _as_opt_path(config.get("EXECUTABLE_PATH"), base)
    extra = {k: v for k, v in config.items() if k not in DEFAULTS}
    return ScriptConfig(
        no_profile=_as_bool("NO_PROFILE", config.get("NO_PROFILE", DEFAULTS["NO_PROFILE"])),
        non_interactive=_as_bool(
            "NON_INTERACTIVE", config.get("NON_INTERACTIVE", DEFAULTS["NON_INTERACTIVE"])),
        hidden=_as_bool("HIDDEN", config.get("HIDDEN", DEFAULTS["HIDDEN"])),
        print_commands=_as_bool(
            "PRINT_COMMANDS", config.get("PRINT_COMMANDS", DEFAULTS["PRINT_COMMANDS"])),
        executable=_as_executable(config.get("EXECUTABLE")),
        executable_path=None if exe_path is None else str(exe_path),
        log_level=_as_log_level(config.get("LOG_LEVEL")),
        log_file=_as_opt_path(config.get("LOG_FILE"), base),
        extra=extra,
    )


# ---------- public API ----------

def load_config(path: str | os.PathLike[str]) -> ScriptConfig:
    """
    Load and validate one configuration file.

    Relative paths inside the file resolve against the file's directory.

    Raises:
        FileNotFoundError: `path` does not exist.
        ValueError: unsupported format or an invalid value.
    """
    file = Path(path)
    # Path(".env").suffix is empty; dotfiles are keyed by their name
    loader = _LOADERS.get(file.suffix.lower() or file.name.lower())
    if loader is None:
        raise ValueError(f"Unsupported config format: {file.suffix or file.name!r}")
    try:
        raw = loader(file)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, configparser.Error) as exc:
        raise ValueError(f"{file}: {exc}") from exc
    return _validate_and_build(_normalize_keys(raw), file.resolve().parent)
