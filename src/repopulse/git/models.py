"""Data models for process results and diff statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one external process invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True, slots=True)
class FileStat:
    path: str
    insertions: int
    deletions: int
    binary: bool = False


@dataclass
class DiffStat:
    """Per-file line counts for one diff, as reported by ``git diff --numstat``."""

    files: List[FileStat] = field(default_factory=list)

    @property
    def files_changed(self) -> int:
        return len(self.files)

    @property
    def insertions(self) -> int:
        return sum(f.insertions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    def render(self) -> str:
        """Human-readable summary, one ``  path | +N -M`` line per file."""
        return "\n".join(
            f"  {f.path} | +{f.insertions} -{f.deletions}" for f in self.files
        )
