"""Aggregate three-dot diff between a branch and its base."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import structlog

from repopulse.context.base import resolve_base_branch
from repopulse.context.models import BaseSource, BranchDiffContext
from repopulse.git.adapter import Git, GitError
from repopulse.git.diffs import truncate_lines
from repopulse.git.gateway import ProcessGateway, SubprocessGateway

logger = structlog.get_logger(__name__)

DEFAULT_MAX_LINES = 500


def build_aggregate_diff(
    repo_path: Union[str, Path],
    branch: str,
    base: str,
    max_lines: int = DEFAULT_MAX_LINES,
    gateway: Optional[ProcessGateway] = None,
    *,
    remote: str = "origin",
) -> BranchDiffContext:
    """Diff and diffstat of ``<remote>/<base>...<remote>/<branch>``.

    If the stat cannot be computed (e.g. the branch is gone from the
    remote) both diff fields stay None. A failure computing the full diff
    after a successful stat keeps the stat.
    """
    git = Git(repo_path, gateway)
    context = BranchDiffContext(branch_name=branch, base_branch=base)
    revision = f"{remote}/{base}...{remote}/{branch}"

    try:
        context.aggregate_stat = git.run("diff", "--stat", "--no-color", revision)
    except GitError as exc:
        logger.debug("aggregate_stat_failed", branch=branch, base=base, error=str(exc))
        return context

    try:
        full_diff = git.run("diff", "--no-color", revision)
    except GitError as exc:
        logger.debug("aggregate_diff_failed", branch=branch, base=base, error=str(exc))
        return context

    context.aggregate_diff, context.aggregate_diff_truncated = truncate_lines(
        full_diff, max_lines
    )
    return context


def branch_diff_context(
    repo_path: Union[str, Path],
    branch: str,
    max_lines: int = DEFAULT_MAX_LINES,
    gateway: Optional[ProcessGateway] = None,
    *,
    fallback_base: str = "dev",
    remote: str = "origin",
) -> BranchDiffContext:
    """Resolve the base for *branch* and build its aggregate diff."""
    gateway = gateway or SubprocessGateway()
    resolution = resolve_base_branch(
        repo_path, branch, gateway, fallback_base=fallback_base, remote=remote
    )
    if resolution.base_branch is None:
        return BranchDiffContext(branch_name=branch, base_branch=None, base_source=BaseSource.NONE)

    context = build_aggregate_diff(
        repo_path, branch, resolution.base_branch, max_lines, gateway, remote=remote
    )
    context.base_source = resolution.source
    return context
