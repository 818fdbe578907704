"""Scanner: ticket keys, remote branches, commits, and repository scans."""

from repopulse.scanner.branches import list_branches
from repopulse.scanner.commits import collect_commits, get_commit_diff, get_commit_diffs
from repopulse.scanner.engine import fetch_latest, scan_all_repos, scan_repo
from repopulse.scanner.models import BranchInfo, CommitDiff, CommitInfo, RepoScanResult
from repopulse.scanner.tickets import extract_ticket_keys

__all__ = [
    "BranchInfo",
    "CommitDiff",
    "CommitInfo",
    "RepoScanResult",
    "collect_commits",
    "extract_ticket_keys",
    "fetch_latest",
    "get_commit_diff",
    "get_commit_diffs",
    "list_branches",
    "scan_all_repos",
    "scan_repo",
]
