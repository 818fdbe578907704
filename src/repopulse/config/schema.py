"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal

OutputFormat = Literal["terminal", "json"]
LogLevel = Literal["debug", "info", "warning", "error"]


@dataclass(frozen=True)
class RepoConfig:
    """A repository to scan. Read-only once loaded."""

    name: str
    path: Path
    default_branch: str = "main"


@dataclass
class TeamMember:
    name: str
    emails: List[str] = field(default_factory=list)


@dataclass
class ScanConfig:
    since_hours: int = 24
    git_timeout: int = 120  # seconds, per git/gh invocation
    fetch: bool = True


@dataclass
class ContextConfig:
    max_diff_lines: int = 500
    fallback_base: str = "dev"
    remote: str = "origin"


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_commits: bool = True
    max_commits: int = 20


@dataclass
class LoggingConfig:
    level: LogLevel = "warning"
    json: bool = False


@dataclass
class RepoPulseConfig:
    repos: List[RepoConfig] = field(default_factory=list)
    team: List[TeamMember] = field(default_factory=list)
    scan: ScanConfig = field(default_factory=ScanConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
