"""Base branch resolution for feature branches.

Priority: pull request target (via the ``gh`` CLI), then the fallback
branch if it exists on the remote, then nothing. ``master`` and ``main``
are never returned, whatever the source.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

import structlog

from repopulse.context.models import BaseResolution, BaseSource
from repopulse.git.adapter import Git
from repopulse.git.gateway import ProcessGateway, SubprocessGateway

logger = structlog.get_logger(__name__)

PROTECTED_BASES = frozenset({"master", "main"})
DEFAULT_FALLBACK_BASE = "dev"


def detect_pr_target_branch(
    repo_path: Union[str, Path],
    branch: str,
    gateway: Optional[ProcessGateway] = None,
) -> Optional[str]:
    """Base ref of the most recent pull request whose head is *branch*.

    Returns None when ``gh`` is missing, exits non-zero, prints something
    other than a non-empty JSON array, or reports no base ref.
    """
    gateway = gateway or SubprocessGateway()
    result = gateway.invoke(
        ["gh", "pr", "list", "--head", branch, "--json", "baseRefName", "--limit", "1"],
        cwd=Path(repo_path),
    )
    if not result.ok:
        logger.debug("pr_lookup_failed", branch=branch, exit_code=result.exit_code,
                     error=result.stderr.strip())
        return None

    try:
        parsed = json.loads(result.stdout)
    except ValueError:
        logger.debug("pr_lookup_failed", branch=branch, error="unparsable gh output")
        return None
    if not isinstance(parsed, list) or not parsed or not isinstance(parsed[0], dict):
        return None

    base = parsed[0].get("baseRefName")
    if not isinstance(base, str) or not base:
        return None
    return base


def resolve_base_branch(
    repo_path: Union[str, Path],
    branch: str,
    gateway: Optional[ProcessGateway] = None,
    *,
    fallback_base: str = DEFAULT_FALLBACK_BASE,
    remote: str = "origin",
) -> BaseResolution:
    """Pick the comparison base for *branch*. Never raises."""
    gateway = gateway or SubprocessGateway()

    pr_target = detect_pr_target_branch(repo_path, branch, gateway)
    if pr_target and pr_target not in PROTECTED_BASES:
        return BaseResolution(base_branch=pr_target, source=BaseSource.PR)

    if fallback_base not in PROTECTED_BASES:
        if Git(repo_path, gateway).ref_exists(f"{remote}/{fallback_base}"):
            return BaseResolution(base_branch=fallback_base, source=BaseSource.FALLBACK)

    return BaseResolution(base_branch=None, source=BaseSource.NONE)
