"""Activity grouping models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set

from repopulse.scanner.models import BranchInfo, CommitInfo

UNKNOWN_MEMBER = "Unknown"


@dataclass
class TeamActivity:
    member_name: str
    emails: List[str] = field(default_factory=list)
    branches: List[BranchInfo] = field(default_factory=list)
    commits: List[CommitInfo] = field(default_factory=list)


@dataclass
class TicketWorkBundle:
    """Commits, branches and authors that touched one ticket in one repo."""

    commits: List[CommitInfo] = field(default_factory=list)
    branch_names: Set[str] = field(default_factory=set)
    author_emails: Set[str] = field(default_factory=set)

    def add(self, commit: CommitInfo) -> None:
        if all(c.sha != commit.sha for c in self.commits):
            self.commits.append(commit)
        self.branch_names.add(commit.branch)
        self.author_emails.add(commit.author_email)
