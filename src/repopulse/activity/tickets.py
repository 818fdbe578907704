"""Group scanned commits into per-ticket, per-repo work bundles."""

from __future__ import annotations

from typing import Dict, Mapping, Sequence

from repopulse.activity.models import TicketWorkBundle
from repopulse.scanner.models import CommitInfo, RepoScanResult

ORPHAN_PREFIX = "branch:"


def branch_key(repo_name: str, branch: str) -> str:
    return f"{repo_name}::{branch}"


def group_commits_by_ticket(
    results: Sequence[RepoScanResult],
    branch_ticket_keys: Mapping[str, str],
) -> Dict[str, Dict[str, TicketWorkBundle]]:
    """Map ticket key -> repo name -> bundle.

    A commit's keys are the key recorded for its branch in
    *branch_ticket_keys* (``"repo::branch"`` -> key) plus the keys found in
    its own message. Commits with no key at all are grouped under
    ``branch:<branch name>``.
    """
    bundles: Dict[str, Dict[str, TicketWorkBundle]] = {}

    def add(key: str, repo_name: str, commit: CommitInfo) -> None:
        per_repo = bundles.setdefault(key, {})
        per_repo.setdefault(repo_name, TicketWorkBundle()).add(commit)

    for result in results:
        for commit in result.commits:
            keys: Dict[str, None] = {}
            mapped = branch_ticket_keys.get(branch_key(result.repo_name, commit.branch))
            if mapped:
                keys[mapped] = None
            for key in commit.ticket_keys:
                keys[key] = None

            if not keys:
                add(f"{ORPHAN_PREFIX}{commit.branch}", result.repo_name, commit)
                continue
            for key in keys:
                add(key, result.repo_name, commit)

    return bundles
