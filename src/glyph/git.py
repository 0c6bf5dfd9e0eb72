"""Thin wrappers around the ``git`` binary."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from glyph.errors import GitError

logger = logging.getLogger(__name__)

_SINCE_ALIASES = {
    "today": "midnight",
    "yesterday": "yesterday midnight",
}


def run_git(*args: str, cwd: str | Path | None = None) -> str:
    """Run ``git <args>`` and return its stdout.

    Raises:
        GitError: git is missing or exited non-zero. The message carries
            git's stderr when it printed any.
    """
    command = ["git", *args]
    logger.debug("Running %s", " ".join(command))
    try:
        proc = subprocess.run(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except FileNotFoundError as exc:
        raise GitError("git executable not found", cause=exc) from exc

    stdout = proc.stdout.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(stderr or f"git {args[0] if args else ''} exited {proc.returncode}")
    return stdout


def get_diff(
    *, staged: bool = False, commit: str = "", cwd: str | Path | None = None
) -> str:
    """Return the diff to explain.

    ``commit`` wins over ``staged``; with neither, the working tree is
    compared against ``HEAD``.
    """
    if commit:
        args = ["show", commit]
    elif staged:
        args = ["diff", "--cached"]
    else:
        args = ["diff", "HEAD"]
    try:
        return run_git(*args, cwd=cwd)
    except GitError as exc:
        raise GitError(
            "git command failed - are you inside a git repository?", cause=exc
        ) from exc


def resolve_since(since: str) -> str:
    """Map ``today``/``yesterday`` to values ``git log --since`` accepts."""
    return _SINCE_ALIASES.get(since.strip().lower(), since)


def get_commit_subjects(since: str, *, cwd: str | Path | None = None) -> str:
    """Return the current author's commit subjects since *since*.

    The author filter comes from ``git config user.email``; when that is not
    set, commits from every author are listed.
    """
    try:
        author = run_git("config", "user.email", cwd=cwd).strip()
    except GitError:
        author = ""

    args = ["log", f"--since={resolve_since(since)}", "--pretty=format:%s"]
    if author:
        args.append(f"--author={author}")
    try:
        return run_git(*args, cwd=cwd)
    except GitError as exc:
        raise GitError(
            "git log failed - are you inside a git repository?", cause=exc
        ) from exc


def current_branch(cwd: str | Path | None = None) -> str:
    return run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=cwd).strip()


def last_commit_subject(cwd: str | Path | None = None) -> str:
    return run_git("log", "-1", "--pretty=%s", cwd=cwd).strip()
