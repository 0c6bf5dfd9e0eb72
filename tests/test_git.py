"""Tests for glyph.git, with subprocess replaced by a recorder."""

from __future__ import annotations

import subprocess

import pytest

import glyph.git as git_module
from glyph.errors import GitError
from glyph.git import get_commit_subjects, get_diff, resolve_since, run_git


class FakeGit:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.results: dict[tuple[str, ...], tuple[int, str, str]] = {}

    def answer(self, *args: str, code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.results[args] = (code, stdout, stderr)

    def __call__(self, command, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(list(command))
        code, stdout, stderr = self.results.get(tuple(command[1:]), (0, "", ""))
        return subprocess.CompletedProcess(
            command, code, stdout=stdout.encode(), stderr=stderr.encode()
        )


@pytest.fixture()
def fake_git(monkeypatch) -> FakeGit:
    fake = FakeGit()
    monkeypatch.setattr(git_module.subprocess, "run", fake)
    return fake


class TestRunGit:
    def test_returns_stdout(self, fake_git) -> None:
        fake_git.answer("status", stdout="clean\n")
        assert run_git("status") == "clean\n"
        assert fake_git.calls == [["git", "status"]]

    def test_nonzero_exit_raises_with_stderr(self, fake_git) -> None:
        fake_git.answer("status", code=128, stderr="fatal: not a git repository\n")
        with pytest.raises(GitError, match="not a git repository"):
            run_git("status")

    def test_missing_binary(self, monkeypatch) -> None:
        def boom(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(git_module.subprocess, "run", boom)
        with pytest.raises(GitError, match="git executable not found"):
            run_git("status")


class TestGetDiff:
    def test_default_is_diff_head(self, fake_git) -> None:
        fake_git.answer("diff", "HEAD", stdout="+line\n")
        assert get_diff() == "+line\n"

    def test_staged(self, fake_git) -> None:
        get_diff(staged=True)
        assert fake_git.calls == [["git", "diff", "--cached"]]

    def test_commit_wins_over_staged(self, fake_git) -> None:
        get_diff(staged=True, commit="abc123")
        assert fake_git.calls == [["git", "show", "abc123"]]

    def test_failure_mentions_repository(self, fake_git) -> None:
        fake_git.answer("diff", "HEAD", code=128, stderr="fatal: not a git repository")
        with pytest.raises(GitError, match="are you inside a git repository"):
            get_diff()


class TestCommitSubjects:
    @pytest.mark.parametrize(
        ("since", "expected"),
        [
            ("today", "midnight"),
            ("Yesterday", "yesterday midnight"),
            ("2 days ago", "2 days ago"),
        ],
    )
    def test_resolve_since(self, since: str, expected: str) -> None:
        assert resolve_since(since) == expected

    def test_filters_by_author_email(self, fake_git) -> None:
        fake_git.answer("config", "user.email", stdout="dev@example.com\n")
        get_commit_subjects("today")
        assert fake_git.calls[-1] == [
            "git",
            "log",
            "--since=midnight",
            "--pretty=format:%s",
            "--author=dev@example.com",
        ]

    def test_no_author_filter_when_email_unset(self, fake_git) -> None:
        fake_git.answer("config", "user.email", code=1)
        get_commit_subjects("yesterday")
        assert fake_git.calls[-1] == [
            "git",
            "log",
            "--since=yesterday midnight",
            "--pretty=format:%s",
        ]
