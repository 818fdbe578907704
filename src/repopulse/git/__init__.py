"""Git interface layer: process gateway, command wrapper, diff helpers."""

from repopulse.git.adapter import Git, GitError
from repopulse.git.diffs import TRUNCATION_MARKER, parse_numstat, truncate_lines
from repopulse.git.gateway import ProcessGateway, SubprocessGateway
from repopulse.git.models import DiffStat, FileStat, ProcessResult

__all__ = [
    "DiffStat",
    "FileStat",
    "Git",
    "GitError",
    "ProcessGateway",
    "ProcessResult",
    "SubprocessGateway",
    "TRUNCATION_MARKER",
    "parse_numstat",
    "truncate_lines",
]
