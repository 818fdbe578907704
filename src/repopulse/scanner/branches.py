"""Remote branch listing."""

from __future__ import annotations

from typing import List, Optional

import structlog

from repopulse.git.adapter import Git
from repopulse.scanner.dates import parse_git_date
from repopulse.scanner.models import BranchInfo

logger = structlog.get_logger(__name__)

FIELD_SEP = "|||"
_FIELDS = [
    "%(objectname)",
    "%(authordate:iso-strict)",
    "%(authoremail)",
    "%(refname)",
    "%(subject)",  # last, so separators inside a subject survive the split
]
BRANCH_FORMAT = FIELD_SEP.join(_FIELDS)
_REMOTES_PREFIX = "refs/remotes/"
EXCLUDED_NAMESPACES = ("release/",)


def parse_branch_line(line: str) -> Optional[BranchInfo]:
    """Parse one formatted ``git branch -r`` line. Returns None to skip it."""
    parts = line.split(FIELD_SEP, len(_FIELDS) - 1)
    if len(parts) < len(_FIELDS):
        return None
    sha, date, raw_email, full_ref, message = parts

    if full_ref.startswith(_REMOTES_PREFIX):
        full_ref = full_ref[len(_REMOTES_PREFIX):]
    if "HEAD" in full_ref.split("/"):
        return None

    remote, sep, name = full_ref.partition("/")
    if not sep or not remote:
        remote, name = "origin", full_ref
    if name.startswith(EXCLUDED_NAMESPACES):
        return None

    try:
        last_date = parse_git_date(date)
    except ValueError:
        return None

    return BranchInfo(
        name=name,
        remote=remote,
        last_commit_sha=sha,
        last_commit_date=last_date,
        last_commit_author_email=raw_email.strip("<>"),
        last_commit_message=message,
    )


def list_branches(git: Git) -> List[BranchInfo]:
    """List remote branches, most recently active first.

    Malformed lines are dropped. A failure of the listing command itself
    raises GitError.
    """
    raw = git.run("branch", "-r", f"--format={BRANCH_FORMAT}", "--sort=-authordate")

    branches: List[BranchInfo] = []
    for line in raw.split("\n"):
        if not line.strip():
            continue
        branch = parse_branch_line(line)
        if branch is not None:
            branches.append(branch)

    logger.debug("branches_listed", repo=str(git.path), count=len(branches))
    return branches
