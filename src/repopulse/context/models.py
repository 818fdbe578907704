"""Branch context models: base resolution, aggregate diffs, repo state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BaseSource(str, Enum):
    """Where a comparison base came from."""

    PR = "pr"
    FALLBACK = "fallback"
    NONE = "none"


@dataclass(frozen=True)
class BaseResolution:
    base_branch: Optional[str]
    source: BaseSource


@dataclass
class BranchDiffContext:
    """Aggregate changes of a branch since it diverged from its base.

    ``base_source`` is set by the caller that resolved the base.
    """

    branch_name: str
    base_branch: Optional[str]  # e.g. "dev"; None if no base was found
    base_source: BaseSource = BaseSource.NONE
    aggregate_diff: Optional[str] = None
    aggregate_diff_truncated: bool = False
    aggregate_stat: Optional[str] = None  # git diff --stat output

    @property
    def stat_summary(self) -> Optional[str]:
        """Last line of the stat, e.g. ``3 files changed, 10 insertions(+)``."""
        if not self.aggregate_stat:
            return None
        lines = [line.strip() for line in self.aggregate_stat.strip().splitlines()]
        return lines[-1] if lines else None


@dataclass(frozen=True)
class RepoState:
    """Where HEAD pointed before a checkout: branch name, or sha when detached."""

    ref: str
    is_detached: bool


@dataclass(frozen=True)
class CheckoutResult:
    ok: bool
    error: Optional[str] = None
