"""Tests for remote branch listing."""

from datetime import timezone
from pathlib import Path

import pytest

from repopulse.git.adapter import Git, GitError
from repopulse.scanner.branches import FIELD_SEP, list_branches, parse_branch_line

FEATURE = "feature/PROJ-42-login"


def _line(ref: str, sha: str = "a" * 40, date: str = "2026-02-15T10:00:00+00:00",
          email: str = "<alice@example.com>", message: str = "fix: PI-1") -> str:
    return FIELD_SEP.join([sha, date, email, ref, message])


class TestParseBranchLine:
    def test_remote_and_name(self):
        branch = parse_branch_line(_line("refs/remotes/origin/feature/PI-123-login"))
        assert branch is not None
        assert branch.remote == "origin"
        assert branch.name == "feature/PI-123-login"
        assert branch.last_commit_author_email == "alice@example.com"
        assert branch.last_commit_date.tzinfo is not None

    def test_utc_z_suffix(self):
        branch = parse_branch_line(_line("refs/remotes/origin/x", date="2026-02-15T10:00:00Z"))
        assert branch.last_commit_date.utcoffset() == timezone.utc.utcoffset(None)

    def test_release_branch_excluded(self):
        assert parse_branch_line(_line("refs/remotes/origin/release/1.0")) is None

    def test_head_pointer_excluded(self):
        assert parse_branch_line(_line("refs/remotes/origin/HEAD")) is None

    def test_head_substring_is_not_head(self):
        branch = parse_branch_line(_line("refs/remotes/origin/fix/HEADER-layout"))
        assert branch is not None
        assert branch.name == "fix/HEADER-layout"

    def test_ref_without_slash_defaults_to_origin(self):
        branch = parse_branch_line(_line("lonely"))
        assert branch.remote == "origin"
        assert branch.name == "lonely"

    def test_short_line_dropped(self):
        assert parse_branch_line(FIELD_SEP.join(["abc", "2026-02-15T10:00:00+00:00"])) is None

    def test_separator_in_subject_kept(self):
        branch = parse_branch_line(_line("refs/remotes/origin/x", message=f"a {FIELD_SEP} b"))
        assert branch.last_commit_message == f"a {FIELD_SEP} b"


class TestListBranches:
    def test_filters_and_keeps_order(self, fake_gateway, tmp_path: Path):
        raw = "\n".join([
            _line("refs/remotes/origin/HEAD"),
            _line("refs/remotes/origin/feature/new", sha="1" * 40),
            "garbage line",
            "",
            _line("refs/remotes/origin/release/1.0"),
            _line("refs/remotes/upstream/main", sha="2" * 40),
        ])
        fake_gateway.add("git", "branch", "-r", stdout=raw + "\n")
        branches = list_branches(Git(tmp_path, fake_gateway))
        assert [(b.remote, b.name) for b in branches] == [
            ("origin", "feature/new"),
            ("upstream", "main"),
        ]

    def test_line_separator_in_subject_kept(self, fake_gateway, tmp_path: Path):
        raw = _line("refs/remotes/origin/feature/x", message="fix\u2028more text\x85tail")
        fake_gateway.add("git", "branch", "-r", stdout=raw + "\n")
        branches = list_branches(Git(tmp_path, fake_gateway))
        assert len(branches) == 1
        assert branches[0].last_commit_message == "fix\u2028more text\x85tail"

    def test_listing_failure_propagates(self, fake_gateway, tmp_path: Path):
        fake_gateway.add("git", "branch", exit_code=128, stderr="fatal: broken")
        with pytest.raises(GitError):
            list_branches(Git(tmp_path, fake_gateway))

    def test_real_repository(self, remote_repo):
        branches = list_branches(Git(remote_repo["path"]))
        names = [b.name for b in branches]
        assert names == [FEATURE, "main", "dev"]
        assert "release/1.0" not in names
        assert all(b.remote == "origin" for b in branches)
        assert branches[0].last_commit_sha == remote_repo["shas"]["merge"]
