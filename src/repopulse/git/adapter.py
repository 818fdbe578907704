"""Git command wrapper — runs git through a process gateway for one clone."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from repopulse.git.gateway import ProcessGateway, SubprocessGateway


class GitError(Exception):
    """Raised when git is unavailable or returns a non-zero exit code."""

    def __init__(self, message: str, args: Sequence[str] = (), stderr: str = "") -> None:
        super().__init__(message)
        self.git_args = list(args)
        self.stderr = stderr


class Git:
    """Bound to a single working tree; every call blocks until git exits."""

    def __init__(
        self,
        repo_path: Union[str, Path],
        gateway: Optional[ProcessGateway] = None,
    ) -> None:
        self.path = Path(repo_path)
        self.gateway: ProcessGateway = gateway or SubprocessGateway()

    def run(self, *args: str) -> str:
        """Run ``git <args>`` and return stdout. Raises GitError on failure."""
        result = self.gateway.invoke(["git", *args], cwd=self.path)
        if not result.ok:
            stderr = result.stderr.strip()
            detail = stderr or f"exit code {result.exit_code}"
            raise GitError(
                f"git {' '.join(args)} failed: {detail}", args=args, stderr=stderr
            )
        return result.stdout

    def is_repo(self) -> bool:
        """Return True if the path is inside a git working tree."""
        if not self.path.is_dir():
            return False
        try:
            out = self.run("rev-parse", "--is-inside-work-tree")
        except GitError:
            return False
        return out.strip() == "true"

    def fetch_all(self) -> None:
        """Refresh every remote, pruning refs deleted upstream."""
        self.run("fetch", "--all", "--prune")

    def ref_exists(self, ref: str) -> bool:
        try:
            self.run("rev-parse", "--verify", "--quiet", ref)
        except GitError:
            return False
        return True
