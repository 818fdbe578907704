"""Ticket key extraction from commit messages and branch names."""

from __future__ import annotations

import re
from typing import List

# Uppercase project prefix, hyphen, number that is not all zeros (PROJ-0 is not a ticket).
TICKET_KEY_RE = re.compile(r"[A-Z][A-Z0-9]+-(?!0+(?![0-9]))[0-9]+")


def extract_ticket_keys(text: str) -> List[str]:
    """Return unique ticket keys in *text*, in order of first appearance."""
    return list(dict.fromkeys(TICKET_KEY_RE.findall(text)))
