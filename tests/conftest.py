"""Shared test fixtures — fake process gateway and throwaway git repos."""

from __future__ import annotations

import os
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest
import structlog

from repopulse.git.gateway import ProcessGateway, SubprocessGateway
from repopulse.git.models import ProcessResult

FEATURE = "feature/PROJ-42-login"


class FakeGateway:
    """Records invocations and answers them from canned results.

    Responses are matched by argument prefix, longest prefix first.
    Unmatched commands go to *fallback* when given, else fail like git does.
    """

    def __init__(self, fallback: Optional[ProcessGateway] = None) -> None:
        self.calls: List[List[str]] = []
        self._responses: List[Tuple[Tuple[str, ...], ProcessResult]] = []
        self._fallback = fallback

    def add(self, *prefix: str, exit_code: int = 0, stdout: str = "", stderr: str = "") -> "FakeGateway":
        self._responses.append((tuple(prefix), ProcessResult(exit_code, stdout, stderr)))
        return self

    def invoke(self, args: Sequence[str], cwd: Path) -> ProcessResult:
        argv = list(args)
        self.calls.append(argv)
        matches = [(p, r) for p, r in self._responses if tuple(argv[: len(p)]) == p]
        if matches:
            return max(matches, key=lambda m: len(m[0]))[1]
        if self._fallback is not None:
            return self._fallback.invoke(argv, cwd)
        return ProcessResult(exit_code=128, stderr=f"fatal: unexpected command: {' '.join(argv)}")

    def commands(self, tool: str = "git") -> List[List[str]]:
        return [c for c in self.calls if c and c[0] == tool]


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def real_git_gateway() -> FakeGateway:
    """Real git for everything not registered; lets tests stub ``gh`` only."""
    return FakeGateway(fallback=SubprocessGateway(timeout=30))


# ── real repositories ─────────────────────────────────────────────────────────


def _git(cwd: Path, *args: str, env: Optional[Dict[str, str]] = None) -> str:
    full_env = {**os.environ, "GIT_CONFIG_NOSYSTEM": "1", **(env or {})}
    result = subprocess.run(
        ["git", "-c", "commit.gpgsign=false", "-c", "init.defaultBranch=main", *args],
        cwd=cwd, capture_output=True, text=True, check=True, env=full_env,
    )
    return result.stdout


def _stamp(when: datetime) -> Dict[str, str]:
    raw = f"{int(when.timestamp())} +0000"
    return {"GIT_AUTHOR_DATE": raw, "GIT_COMMITTER_DATE": raw}


def _commit(
    cwd: Path,
    filename: str,
    content: str,
    message: str,
    when: datetime,
    author_email: Optional[str] = None,
) -> str:
    (cwd / filename).write_text(content)
    _git(cwd, "add", filename)
    env = _stamp(when)
    if author_email:
        env["GIT_AUTHOR_EMAIL"] = author_email
    _git(cwd, "commit", "-m", message, env=env)
    return _git(cwd, "rev-parse", "HEAD").strip()


@pytest.fixture
def remote_repo(tmp_path: Path) -> Dict[str, object]:
    """A clone with a bare ``origin`` and these remote branches.

    main     init (root, -5h) ─ hotfix (-3h)
    dev      init ─ dev work (-4h)
    feature  dev work ─ add login (-2h) ─ merge main (-1h, merge commit)
    release/1.0  init ─ release prep (-30m)

    The clone ends up on ``main``. Returns paths and commit shas.
    """
    now = datetime.now(timezone.utc).replace(microsecond=0)
    origin = tmp_path / "origin.git"
    work = tmp_path / "work"
    origin.mkdir()
    work.mkdir()
    _git(origin, "init", "--bare")
    _git(work, "init")
    _git(work, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(work, "config", "user.email", "alice@example.com")
    _git(work, "config", "user.name", "Alice Dev")

    shas: Dict[str, str] = {}
    shas["init"] = _commit(work, "README.md", "# Test\n", "init PROJ-1", now - timedelta(hours=5))

    _git(work, "checkout", "-b", "dev")
    shas["dev"] = _commit(work, "dev.txt", "dev\n", "dev work", now - timedelta(hours=4))

    _git(work, "checkout", "main")
    shas["hotfix"] = _commit(work, "README.md", "# Test\nfixed\n", "hotfix", now - timedelta(hours=3))

    _git(work, "checkout", "-b", FEATURE, "dev")
    shas["login"] = _commit(
        work, "login.py", "def login():\n    return True\n",
        "add login PROJ-42\n\nUses the new session store.",
        now - timedelta(hours=2), author_email="Bob@Example.com",
    )
    _git(work, "merge", "--no-ff", "-m", "Merge main", "main", env=_stamp(now - timedelta(hours=1)))
    shas["merge"] = _git(work, "rev-parse", "HEAD").strip()

    _git(work, "checkout", "-b", "release/1.0", "main")
    shas["release"] = _commit(work, "VERSION", "1.0\n", "release prep", now - timedelta(minutes=30))

    _git(work, "checkout", "main")
    _git(work, "remote", "add", "origin", str(origin))
    _git(work, "push", "origin", "main", "dev", FEATURE, "release/1.0")
    _git(work, "fetch", "origin")
    _git(work, "remote", "set-head", "origin", "main")

    return {"path": work, "origin": origin, "shas": shas, "now": now, "feature": FEATURE}


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """A single-commit repository with no remote."""
    _git(tmp_path, "init")
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    _commit(tmp_path, "README.md", "# Test\n", "init", datetime.now(timezone.utc))
    return tmp_path
