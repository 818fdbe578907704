"""Group branches and commits by team member."""

from __future__ import annotations

from typing import Dict, List, Sequence

from repopulse.activity.models import UNKNOWN_MEMBER, TeamActivity
from repopulse.config.schema import TeamMember
from repopulse.scanner.models import BranchInfo, CommitInfo


def build_email_map(team: Sequence[TeamMember]) -> Dict[str, str]:
    """Lower-cased email -> member name."""
    return {
        email.lower(): member.name
        for member in team
        for email in member.emails
    }


def group_by_team_member(
    team: Sequence[TeamMember],
    branches: Sequence[BranchInfo],
    commits: Sequence[CommitInfo],
) -> List[TeamActivity]:
    """One TeamActivity per member, in team order.

    Commits are matched on author email, branches on the author of their
    last commit. Anything unmatched lands in a trailing "Unknown" entry,
    which is only present when there is something in it.
    """
    email_to_name = build_email_map(team)
    activities: Dict[str, TeamActivity] = {
        m.name: TeamActivity(member_name=m.name, emails=list(m.emails)) for m in team
    }
    unknown = TeamActivity(member_name=UNKNOWN_MEMBER)

    for commit in commits:
        name = email_to_name.get(commit.author_email.lower())
        (activities[name] if name else unknown).commits.append(commit)

    for branch in branches:
        name = email_to_name.get(branch.last_commit_author_email.lower())
        (activities[name] if name else unknown).branches.append(branch)

    grouped = list(activities.values())
    if unknown.commits or unknown.branches:
        grouped.append(unknown)
    return grouped
