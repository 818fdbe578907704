"""Branch context: base resolution, aggregate diffs, checkout and restore."""

from repopulse.context.base import PROTECTED_BASES, detect_pr_target_branch, resolve_base_branch
from repopulse.context.checkout import (
    checked_out,
    checkout_branch,
    record_repo_state,
    restore_repo_state,
)
from repopulse.context.diff import branch_diff_context, build_aggregate_diff
from repopulse.context.models import (
    BaseResolution,
    BaseSource,
    BranchDiffContext,
    CheckoutResult,
    RepoState,
)

__all__ = [
    "BaseResolution",
    "BaseSource",
    "BranchDiffContext",
    "CheckoutResult",
    "PROTECTED_BASES",
    "RepoState",
    "branch_diff_context",
    "build_aggregate_diff",
    "checked_out",
    "checkout_branch",
    "detect_pr_target_branch",
    "record_repo_state",
    "restore_repo_state",
]
