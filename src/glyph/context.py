"""Directory context gathered for ``glyph ask``.

Each detector returns a short description of one kind of project found in
the directory, or an empty string.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path

from glyph.errors import GitError
from glyph.git import current_branch, last_commit_subject

logger = logging.getLogger(__name__)

MAX_NODE_DEPENDENCIES = 5


def python_context(directory: Path) -> str:
    """Project name and Python requirement from ``pyproject.toml``."""
    path = directory / "pyproject.toml"
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except (OSError, ValueError):
        return ""
    project = data.get("project")
    if not isinstance(project, dict):
        return ""
    name = project.get("name")
    if not isinstance(name, str) or not name:
        return ""
    requires = project.get("requires-python")
    if isinstance(requires, str) and requires:
        return f"Python project: {name} (python {requires})"
    return f"Python project: {name}"


def go_context(directory: Path) -> str:
    """Module name and Go version from ``go.mod``."""
    try:
        text = (directory / "go.mod").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""

    module = go_version = ""
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("module "):
            module = line[len("module "):].strip()
        elif line.startswith("go "):
            go_version = line[len("go "):].strip()
        if module and go_version:
            break
    if not module:
        return ""
    return f"Go module: {module} (go {go_version})"


def node_context(directory: Path) -> str:
    """Package name and a few dependencies from ``package.json``."""
    try:
        pkg = json.loads((directory / "package.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return ""
    if not isinstance(pkg, dict):
        return ""
    name = pkg.get("name")
    if not isinstance(name, str) or not name:
        return ""

    result = f"Node project: {name}"
    deps = pkg.get("dependencies")
    if isinstance(deps, dict) and deps:
        shown = list(deps)[:MAX_NODE_DEPENDENCIES]
        result += "\nDependencies: " + ", ".join(shown)
    return result


def git_context(directory: Path) -> str:
    """Current branch and last commit subject."""
    try:
        branch = current_branch(directory)
    except GitError:
        return ""
    try:
        commit = last_commit_subject(directory)
    except GitError:
        return f"Git branch: {branch}"
    return f"Git branch: {branch}\nLast commit: {commit}"


_DETECTORS = (python_context, go_context, git_context, node_context)


def gather_context(directory: str | Path) -> str:
    """Collect every detector's findings for *directory*, one per line."""
    directory = Path(directory)
    parts = [part for part in (detect(directory) for detect in _DETECTORS) if part]
    logger.debug("Gathered %d context section(s) from %s", len(parts), directory)
    return "\n".join(parts)
