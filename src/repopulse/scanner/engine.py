"""Repository scan engine — branches, commits and dedup for one or many repos.

Failure isolation: :func:`scan_repo` never raises. Every problem becomes an
entry in ``RepoScanResult.errors`` so a batch over N repositories always
returns N results.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

import structlog

from repopulse.config.schema import RepoConfig
from repopulse.git.adapter import Git, GitError
from repopulse.git.gateway import ProcessGateway
from repopulse.scanner.branches import list_branches
from repopulse.scanner.commits import DEFAULT_WINDOW, collect_commits
from repopulse.scanner.models import BranchInfo, CommitInfo, RepoScanResult

logger = structlog.get_logger(__name__)


def fetch_latest(repo_path: Union[str, Path], gateway: Optional[ProcessGateway] = None) -> None:
    """Refresh all remotes of the clone at *repo_path*. Raises GitError."""
    Git(repo_path, gateway).fetch_all()


def _init_repo(git: Git, fetch: bool) -> None:
    if not git.is_repo():
        raise GitError(f"Not a git repository: {git.path}")
    if fetch:
        git.fetch_all()


def scan_repo(
    repo: RepoConfig,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    *,
    gateway: Optional[ProcessGateway] = None,
    fetch: bool = True,
) -> RepoScanResult:
    """Scan one repository: refresh remotes, list branches, collect commits.

    A missing *since* becomes 24 hours before the call, shared by every branch.
    """
    start = time.perf_counter()
    if since is None:
        since = datetime.now(timezone.utc) - DEFAULT_WINDOW
    result = RepoScanResult(repo_name=repo.name, repo_path=str(repo.path))
    git = Git(repo.path, gateway)

    try:
        _init_repo(git, fetch)
    except GitError as exc:
        logger.warning("repo_init_failed", repo=repo.name, error=str(exc))
        result.errors.append(f"Failed to init repo: {exc}")
        return result

    branches: List[BranchInfo] = []
    try:
        branches = list_branches(git)
    except GitError as exc:
        logger.warning("branch_list_failed", repo=repo.name, error=str(exc))
        result.errors.append(f"Failed to list branches: {exc}")
    result.branches = branches

    # Branches arrive most-recent first; the first branch to reach a commit keeps it.
    seen: Set[str] = set()
    commits: List[CommitInfo] = []
    for branch in branches:
        try:
            branch_commits = collect_commits(git, repo.name, branch.name, since, until)
        except (GitError, ValueError) as exc:
            logger.warning(
                "branch_commits_failed", repo=repo.name, branch=branch.name, error=str(exc)
            )
            result.errors.append(f"Failed to get commits for {branch.name}: {exc}")
            continue
        for commit in branch_commits:
            if commit.sha in seen:
                continue
            seen.add(commit.sha)
            commits.append(commit)

    commits.sort(key=lambda c: c.date, reverse=True)
    result.commits = commits

    logger.info(
        "repo_scan_finished",
        repo=repo.name,
        branches=len(result.branches),
        commits=len(result.commits),
        errors=len(result.errors),
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return result


def scan_all_repos(
    repos: Iterable[RepoConfig],
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    *,
    gateway: Optional[ProcessGateway] = None,
    fetch: bool = True,
) -> List[RepoScanResult]:
    """Scan each repository in turn; one result per input, in input order."""
    if since is None:
        since = datetime.now(timezone.utc) - DEFAULT_WINDOW
    results: List[RepoScanResult] = []
    for repo in repos:
        logger.info("repo_scan_started", repo=repo.name, path=str(repo.path))
        try:
            result = scan_repo(repo, since, until, gateway=gateway, fetch=fetch)
        except Exception as exc:
            logger.exception("repo_scan_crashed", repo=repo.name)
            result = RepoScanResult(
                repo_name=repo.name,
                repo_path=str(repo.path),
                errors=[f"Unexpected scanner error: {exc}"],
            )
        results.append(result)
    return results
