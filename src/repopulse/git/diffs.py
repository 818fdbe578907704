"""Diff text helpers: numstat parsing and line-bounded truncation."""

from __future__ import annotations

from typing import Tuple

from repopulse.git.models import DiffStat, FileStat

TRUNCATION_MARKER = "... (truncated)"


def parse_numstat(output: str) -> DiffStat:
    """Parse ``git diff --numstat`` output.

    Binary files show as ``-\\t-\\tpath`` and count as zero lines.
    """
    files = []
    for line in output.split("\n"):
        parts = line.split("\t", 2)
        if len(parts) != 3:
            continue
        added, removed, path = parts
        if added == "-" and removed == "-":
            files.append(FileStat(path=path, insertions=0, deletions=0, binary=True))
            continue
        try:
            files.append(FileStat(path=path, insertions=int(added), deletions=int(removed)))
        except ValueError:
            continue
    return DiffStat(files=files)


def truncate_lines(text: str, max_lines: int) -> Tuple[str, bool]:
    """Keep at most *max_lines* lines of *text*.

    Returns ``(text, truncated)``. A truncated result is the first
    *max_lines* lines followed by a marker line.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if len(lines) <= max_lines:
        return text, False
    return "\n".join(lines[:max_lines]) + "\n" + TRUNCATION_MARKER, True
