"""Commit collection for a single remote branch, with per-commit diff stats."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import structlog

from repopulse.git.adapter import Git, GitError
from repopulse.git.diffs import parse_numstat, truncate_lines
from repopulse.git.models import DiffStat
from repopulse.scanner.dates import parse_git_date
from repopulse.scanner.models import CommitDiff, CommitInfo
from repopulse.scanner.tickets import extract_ticket_keys

logger = structlog.get_logger(__name__)

DEFAULT_WINDOW = timedelta(hours=24)
SHORT_SHA_LENGTH = 8
DEFAULT_REMOTE = "origin"

# ASCII unit/record separators never appear in commit metadata.
_UNIT = "\x1f"
_RECORD = "\x1e"
LOG_FORMAT = _UNIT.join(["%H", "%aN", "%aE", "%aI", "%s", "%b"]) + _RECORD


def _git_date(value: datetime) -> str:
    return value.replace(microsecond=0).isoformat()


def _parse_log(output: str) -> List[dict]:
    entries = []
    for record in output.split(_RECORD):
        record = record.strip("\n")
        if not record.strip():
            continue
        parts = record.split(_UNIT, 5)
        if len(parts) < 6:
            continue
        sha, name, email, date, subject, body = parts
        entries.append({
            "sha": sha.strip(),
            "author_name": name,
            "author_email": email,
            "date": date,
            "subject": subject,
            "body": body.strip(),
        })
    return entries


def commit_diffstat(git: Git, sha: str) -> DiffStat:
    """Diff stats of *sha* against its first parent.

    A root commit has no parent and yields an empty DiffStat.
    """
    try:
        output = git.run("diff", "--numstat", "--no-color", f"{sha}^..{sha}")
    except GitError as exc:
        logger.debug("diffstat_unavailable", sha=sha, error=str(exc))
        return DiffStat()
    return parse_numstat(output)


def collect_commits(
    git: Git,
    repo_name: str,
    branch: str,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    *,
    remote: str = DEFAULT_REMOTE,
) -> List[CommitInfo]:
    """Non-merge commits on ``<remote>/<branch>`` inside the time window.

    *since* defaults to 24 hours before the call. A branch that is missing
    on the remote, or has no commits in the window, yields an empty list.
    """
    if since is None:
        since = datetime.now(timezone.utc) - DEFAULT_WINDOW

    args = [
        "log",
        f"{remote}/{branch}",
        f"--since={_git_date(since)}",
        "--no-merges",
        f"--format={LOG_FORMAT}",
    ]
    if until is not None:
        args.append(f"--until={_git_date(until)}")
    args.append("--")

    try:
        output = git.run(*args)
    except GitError as exc:
        logger.debug("commit_log_unavailable", branch=branch, error=str(exc))
        return []

    commits: List[CommitInfo] = []
    for entry in _parse_log(output):
        stat = commit_diffstat(git, entry["sha"])
        message = entry["subject"]
        if entry["body"]:
            message += "\n" + entry["body"]
        message = message.strip()

        commits.append(
            CommitInfo(
                sha=entry["sha"],
                short_sha=entry["sha"][:SHORT_SHA_LENGTH],
                author_name=entry["author_name"],
                author_email=entry["author_email"].lower(),
                date=parse_git_date(entry["date"]),
                message=message,
                branch=branch,
                repo=repo_name,
                files_changed=stat.files_changed,
                insertions=stat.insertions,
                deletions=stat.deletions,
                diff_stat=stat.render(),
                ticket_keys=extract_ticket_keys(message + " " + branch),
            )
        )
    return commits


def get_commit_diff(git: Git, sha: str, max_lines: int = 500) -> CommitDiff:
    """Full diff of one commit, truncated to *max_lines* lines."""
    try:
        diff = git.run("diff", "--no-color", f"{sha}^..{sha}")
    except GitError:
        try:
            # Root commit: diff against the empty tree
            diff = git.run("show", "--no-color", "--format=", "--root", sha)
        except GitError as exc:
            logger.debug("commit_diff_unavailable", sha=sha, error=str(exc))
            diff = "(could not retrieve diff)"

    text, truncated = truncate_lines(diff, max_lines)
    return CommitDiff(sha=sha, diff=text, truncated=truncated)


def get_commit_diffs(git: Git, shas: Sequence[str], max_lines: int = 500) -> List[CommitDiff]:
    return [get_commit_diff(git, sha, max_lines) for sha in shas]
