"""TOML-based wait configuration.

Loads ~/.converge/defaults.toml (global) and converge.toml (project),
merges them, and resolves named wait profiles into WaitConfig instances.

    [wait]
    timeout = 600
    interval = 10

    [waits.image-build]
    timeout = 3600
    backoff = 2.0
    max_interval = 60
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from converge.constants import GLOBAL_CONFIG_PATH, PROJECT_CONFIG_NAME
from converge.core.exceptions import ConfigurationError
from converge.wait import WaitConfig

type RawConfig = dict[str, Any]

_WAIT_FIELDS = frozenset({"timeout", "interval", "backoff", "max_interval"})


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("wait", {})
    merged.setdefault("waits", {})
    return merged


def _table(source: str, raw: Any) -> RawConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source} must be a table, got {type(raw).__name__}")
    return raw


def _build_wait(source: str, raw: RawConfig) -> WaitConfig:
    unknown = set(raw) - _WAIT_FIELDS
    if unknown:
        raise ConfigurationError(
            f"Unknown field(s) in {source}: {', '.join(sorted(unknown))}. "
            f"Valid: {', '.join(sorted(_WAIT_FIELDS))}"
        )
    try:
        return WaitConfig(**raw)
    except TypeError as e:
        raise ConfigurationError(f"Invalid value in {source}: {e}") from e


def resolve_wait(
    name: str | None = None,
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> WaitConfig:
    """Build the WaitConfig for profile ``name``, or the defaults when None.

    A profile only needs the fields it changes; the rest come from [wait].
    """
    config = load_config(project_dir=project_dir, global_path=global_path)
    defaults = _table("[wait]", config["wait"])

    if name is None:
        return _build_wait("[wait]", defaults)

    profiles = _table("[waits]", config["waits"])
    if name not in profiles:
        raise KeyError(f"Wait profile '{name}' not found. Available: {', '.join(profiles) or 'none'}")

    source = f"[waits.{name}]"
    profile = _table(source, profiles[name])
    return _build_wait(source, _deep_merge(defaults, profile))
