"""Tests for the process gateway, the git wrapper, and diff helpers."""

from pathlib import Path

import pytest

from repopulse.git.adapter import Git, GitError
from repopulse.git.diffs import TRUNCATION_MARKER, parse_numstat, truncate_lines
from repopulse.git.gateway import EXIT_NOT_FOUND, EXIT_TIMEOUT, SubprocessGateway


class TestSubprocessGateway:
    def test_missing_executable_is_a_result(self, tmp_path: Path):
        result = SubprocessGateway().invoke(["repopulse-no-such-tool-xyz"], cwd=tmp_path)
        assert result.exit_code == EXIT_NOT_FOUND
        assert not result.ok
        assert "not installed" in result.stderr

    def test_captures_stdout(self, tmp_git_repo: Path):
        result = SubprocessGateway().invoke(["git", "rev-parse", "--is-inside-work-tree"], cwd=tmp_git_repo)
        assert result.ok
        assert result.stdout.strip() == "true"

    def test_timeout_is_a_result(self, tmp_path: Path):
        result = SubprocessGateway(timeout=0.01).invoke(["sleep", "5"], cwd=tmp_path)
        assert result.exit_code == EXIT_TIMEOUT
        assert "timed out" in result.stderr


class TestGit:
    def test_run_raises_on_failure(self, fake_gateway, tmp_path: Path):
        fake_gateway.add("git", "status", exit_code=128, stderr="fatal: not a git repository")
        with pytest.raises(GitError, match="not a git repository"):
            Git(tmp_path, fake_gateway).run("status")

    def test_error_keeps_args_and_stderr(self, fake_gateway, tmp_path: Path):
        fake_gateway.add("git", "log", exit_code=128, stderr="fatal: bad revision\n")
        with pytest.raises(GitError) as info:
            Git(tmp_path, fake_gateway).run("log", "origin/x")
        assert info.value.git_args == ["log", "origin/x"]
        assert info.value.stderr == "fatal: bad revision"

    def test_is_repo_false_for_missing_dir(self, fake_gateway, tmp_path: Path):
        assert Git(tmp_path / "missing", fake_gateway).is_repo() is False
        assert fake_gateway.calls == []

    def test_is_repo_real(self, tmp_git_repo: Path):
        assert Git(tmp_git_repo).is_repo() is True

    def test_is_repo_false_outside_repo(self, fake_gateway, tmp_path: Path):
        fake_gateway.add("git", "rev-parse", exit_code=128, stderr="fatal: not a git repository")
        assert Git(tmp_path, fake_gateway).is_repo() is False

    def test_ref_exists(self, fake_gateway, tmp_path: Path):
        fake_gateway.add("git", "rev-parse", "--verify", "--quiet", "origin/dev", stdout="abc\n")
        git = Git(tmp_path, fake_gateway)
        assert git.ref_exists("origin/dev") is True
        assert git.ref_exists("origin/nope") is False

    def test_fetch_all_prunes(self, fake_gateway, tmp_path: Path):
        fake_gateway.add("git", "fetch")
        Git(tmp_path, fake_gateway).fetch_all()
        assert fake_gateway.calls == [["git", "fetch", "--all", "--prune"]]


class TestParseNumstat:
    def test_counts_and_render(self):
        stat = parse_numstat("10\t2\tsrc/app.py\n3\t0\tREADME.md\n")
        assert stat.files_changed == 2
        assert stat.insertions == 13
        assert stat.deletions == 2
        assert stat.render() == "  src/app.py | +10 -2\n  README.md | +3 -0"

    def test_binary_counts_zero(self):
        stat = parse_numstat("-\t-\timage.png\n1\t1\ta.txt\n")
        assert stat.files_changed == 2
        assert stat.files[0].binary is True
        assert stat.insertions == 1

    def test_empty_output(self):
        stat = parse_numstat("")
        assert stat.files_changed == 0
        assert stat.render() == ""


class TestTruncateLines:
    def test_truncates_to_exact_line_count(self):
        diff = "\n".join(f"line {i}" for i in range(1, 51)) + "\n"
        text, truncated = truncate_lines(diff, 10)
        lines = text.split("\n")
        assert truncated is True
        assert len(lines) == 11
        assert lines[:10] == [f"line {i}" for i in range(1, 11)]
        assert lines[10] == TRUNCATION_MARKER

    def test_short_text_untouched(self):
        diff = "a\nb\nc\n"
        assert truncate_lines(diff, 3) == (diff, False)

    def test_form_feed_is_not_a_line_break(self):
        diff = "diff --git a/x b/x\n--- a/x\n+++ b/x\n@@ -0,0 +1 @@\n+a\x0cb\n"
        assert truncate_lines(diff, 5) == (diff, False)

    def test_unicode_separators_are_not_line_breaks(self):
        diff = "+one two\n+three\x85four\n+five\x1efive\n"
        assert truncate_lines(diff, 3) == (diff, False)

    def test_crlf_content_kept_when_truncated(self):
        diff = "".join(f"+line {i}\r\n" for i in range(20))
        text, truncated = truncate_lines(diff, 10)
        lines = text.split("\n")
        assert truncated is True
        assert lines[:10] == [f"+line {i}\r" for i in range(10)]
        assert lines[10] == TRUNCATION_MARKER

    def test_missing_trailing_newline(self):
        diff = "a\nb\nc"
        assert truncate_lines(diff, 3) == (diff, False)
        assert truncate_lines(diff, 2) == ("a\nb\n" + TRUNCATION_MARKER, True)
