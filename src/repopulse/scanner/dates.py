"""Parsing of git's strict ISO-8601 timestamps."""

from __future__ import annotations

from datetime import datetime


def parse_git_date(value: str) -> datetime:
    """Parse ``%aI`` / ``authordate:iso-strict`` output into an aware datetime."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
