"""Load and merge configuration from repopulse.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from repopulse.config.defaults import CONFIG_FILENAME
from repopulse.config.schema import (
    ContextConfig,
    LoggingConfig,
    OutputConfig,
    RepoConfig,
    RepoPulseConfig,
    ScanConfig,
    TeamMember,
)


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def _build_repos(raw: Dict[str, Any], config_dir: Path) -> List[RepoConfig]:
    repos: List[RepoConfig] = []
    for idx, entry in enumerate(raw.get("repos", [])):
        if not isinstance(entry, dict) or "name" not in entry or "path" not in entry:
            raise ConfigError(f"[[repos]] entry #{idx + 1} needs 'name' and 'path'")
        path = Path(entry["path"]).expanduser()
        if not path.is_absolute():
            path = (config_dir / path).resolve()
        repos.append(
            RepoConfig(
                name=str(entry["name"]),
                path=path,
                default_branch=str(entry.get("default_branch", "main")),
            )
        )
    return repos


def _build_team(raw: Dict[str, Any]) -> List[TeamMember]:
    team: List[TeamMember] = []
    for entry in raw.get("team", []):
        if not isinstance(entry, dict) or "name" not in entry:
            raise ConfigError("[[team]] entries need a 'name'")
        team.append(TeamMember(name=str(entry["name"]), emails=list(entry.get("emails", []))))
    return team


def _int_env(name: str) -> Optional[int]:
    val = os.environ.get(name)
    if not val:
        return None
    try:
        parsed = int(val)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _merge_env_overrides(cfg: RepoPulseConfig) -> None:
    """Apply REPOPULSE_* environment variable overrides."""
    if val := os.environ.get("REPOPULSE_FORMAT"):
        if val in ("terminal", "json"):
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("REPOPULSE_LOG_LEVEL"):
        if val.lower() in ("debug", "info", "warning", "error"):
            cfg.logging.level = val.lower()  # type: ignore[assignment]
    if (num := _int_env("REPOPULSE_MAX_DIFF_LINES")) is not None:
        cfg.context.max_diff_lines = num
    if (num := _int_env("REPOPULSE_GIT_TIMEOUT")) is not None:
        cfg.scan.git_timeout = num
    if (num := _int_env("REPOPULSE_SINCE_HOURS")) is not None:
        cfg.scan.since_hours = num


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> RepoPulseConfig:
    """Load, validate, and return a RepoPulseConfig."""
    config_path = find_config_file(base_dir, config_override)
    if config_path is None:
        raise ConfigError(f"No {CONFIG_FILENAME} found in {base_dir}")

    raw = _parse_toml(config_path)
    try:
        cfg = RepoPulseConfig(
            repos=_build_repos(raw, config_path.parent.resolve()),
            team=_build_team(raw),
            scan=_build_section(raw, ScanConfig, "scan"),
            context=_build_section(raw, ContextConfig, "context"),
            output=_build_section(raw, OutputConfig, "output"),
            logging=_build_section(raw, LoggingConfig, "logging"),
        )
    except (TypeError, AttributeError) as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc

    if not cfg.repos:
        raise ConfigError(f"{config_path}: at least one [[repos]] entry is required")

    _merge_env_overrides(cfg)
    return cfg
