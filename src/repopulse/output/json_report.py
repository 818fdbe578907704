"""JSON reporter for scan results and branch contexts."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from repopulse.context.models import BranchDiffContext
from repopulse.scanner.models import BranchInfo, CommitInfo, RepoScanResult


def branch_to_dict(branch: BranchInfo) -> Dict[str, Any]:
    return {
        "name": branch.name,
        "remote": branch.remote,
        "last_commit_sha": branch.last_commit_sha,
        "last_commit_date": branch.last_commit_date.isoformat(),
        "last_commit_author_email": branch.last_commit_author_email,
        "last_commit_message": branch.last_commit_message,
    }


def commit_to_dict(commit: CommitInfo) -> Dict[str, Any]:
    return {
        "sha": commit.sha,
        "short_sha": commit.short_sha,
        "author_name": commit.author_name,
        "author_email": commit.author_email,
        "date": commit.date.isoformat(),
        "message": commit.message,
        "branch": commit.branch,
        "repo": commit.repo,
        "files_changed": commit.files_changed,
        "insertions": commit.insertions,
        "deletions": commit.deletions,
        "diff_stat": commit.diff_stat,
        "ticket_keys": list(commit.ticket_keys),
    }


def scan_to_dict(result: RepoScanResult) -> Dict[str, Any]:
    """Convert a RepoScanResult to a JSON-serialisable dict."""
    return {
        "repo_name": result.repo_name,
        "repo_path": result.repo_path,
        "branches": [branch_to_dict(b) for b in result.branches],
        "commits": [commit_to_dict(c) for c in result.commits],
        "errors": list(result.errors),
    }


def context_to_dict(context: BranchDiffContext) -> Dict[str, Any]:
    return {
        "branch_name": context.branch_name,
        "base_branch": context.base_branch,
        "base_source": context.base_source.value,
        "aggregate_diff": context.aggregate_diff,
        "aggregate_diff_truncated": context.aggregate_diff_truncated,
        "aggregate_stat": context.aggregate_stat,
    }


def render_scan(results: Sequence[RepoScanResult]) -> str:
    """Return formatted JSON for a batch of scan results."""
    repos: List[Dict[str, Any]] = [scan_to_dict(r) for r in results]
    return json.dumps(
        {
            "version": "1.0",
            "total_commits": sum(len(r.commits) for r in results),
            "repos": repos,
        },
        indent=2,
    )


def render_context(context: BranchDiffContext) -> str:
    return json.dumps(context_to_dict(context), indent=2)
