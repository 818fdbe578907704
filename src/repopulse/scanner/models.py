"""Scan data models: branches, commits, and per-repository results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List


@dataclass(frozen=True)
class BranchInfo:
    """A remote branch and its latest commit, recomputed on every scan."""

    name: str  # e.g. "feature/PROJ-123-user-settings"
    remote: str  # e.g. "origin"
    last_commit_sha: str
    last_commit_date: datetime
    last_commit_author_email: str
    last_commit_message: str


@dataclass
class CommitInfo:
    sha: str
    short_sha: str
    author_name: str
    author_email: str
    date: datetime
    message: str
    branch: str
    repo: str
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0
    diff_stat: str = ""
    ticket_keys: List[str] = field(default_factory=list)


@dataclass
class CommitDiff:
    sha: str
    diff: str
    truncated: bool = False


@dataclass
class RepoScanResult:
    """Everything gathered for one repository in one scan call.

    ``errors`` holds non-fatal problems; a result with errors may still
    carry branches and commits.
    """

    repo_name: str
    repo_path: str
    branches: List[BranchInfo] = field(default_factory=list)
    commits: List[CommitInfo] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
