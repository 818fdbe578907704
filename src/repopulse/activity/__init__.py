"""Activity grouping: by team member and by ticket."""

from repopulse.activity.authors import build_email_map, group_by_team_member
from repopulse.activity.models import TeamActivity, TicketWorkBundle
from repopulse.activity.tickets import group_commits_by_ticket

__all__ = [
    "TeamActivity",
    "TicketWorkBundle",
    "build_email_map",
    "group_by_team_member",
    "group_commits_by_ticket",
]
