"""Detached checkout of a remote branch and restoration of the prior HEAD.

The record/checkout/restore cycle is the only thing in repopulse that
mutates a working tree. Callers must not run it concurrently with another
cycle or a scan against the same clone.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

import structlog

from repopulse.context.models import CheckoutResult, RepoState
from repopulse.git.adapter import Git, GitError
from repopulse.git.gateway import ProcessGateway, SubprocessGateway

logger = structlog.get_logger(__name__)


def record_repo_state(
    repo_path: Union[str, Path],
    gateway: Optional[ProcessGateway] = None,
) -> RepoState:
    """Branch name if HEAD is symbolic, else the exact detached sha.

    Raises GitError if HEAD cannot be resolved at all.
    """
    git = Git(repo_path, gateway)
    try:
        ref = git.run("symbolic-ref", "--short", "HEAD").strip()
        return RepoState(ref=ref, is_detached=False)
    except GitError:
        sha = git.run("rev-parse", "HEAD").strip()
        return RepoState(ref=sha, is_detached=True)


def checkout_branch(
    repo_path: Union[str, Path],
    branch: str,
    gateway: Optional[ProcessGateway] = None,
    *,
    remote: str = "origin",
) -> CheckoutResult:
    """Detach HEAD at ``<remote>/<branch>`` without touching local branches."""
    git = Git(repo_path, gateway)
    try:
        git.run("checkout", "--detach", f"{remote}/{branch}")
    except GitError as exc:
        logger.debug("checkout_failed", repo=str(repo_path), branch=branch, error=str(exc))
        return CheckoutResult(ok=False, error=str(exc))
    return CheckoutResult(ok=True)


def restore_repo_state(
    repo_path: Union[str, Path],
    state: RepoState,
    gateway: Optional[ProcessGateway] = None,
) -> bool:
    """Return the working tree to *state*. Failures are logged, not raised."""
    git = Git(repo_path, gateway)
    args = ["checkout", "--detach", state.ref] if state.is_detached else ["checkout", state.ref]
    try:
        git.run(*args)
    except GitError as exc:
        logger.warning("restore_failed", repo=str(repo_path), ref=state.ref, error=str(exc))
        return False
    return True


@contextmanager
def checked_out(
    repo_path: Union[str, Path],
    branch: str,
    gateway: Optional[ProcessGateway] = None,
    *,
    remote: str = "origin",
) -> Iterator[CheckoutResult]:
    """Record HEAD, detach at *branch*, and restore on exit.

    Yields the CheckoutResult; the body should check ``ok`` before relying
    on the working tree contents.
    """
    gateway = gateway or SubprocessGateway()
    state = record_repo_state(repo_path, gateway)
    result = checkout_branch(repo_path, branch, gateway, remote=remote)
    try:
        yield result
    finally:
        restore_repo_state(repo_path, state, gateway)
