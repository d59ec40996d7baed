"""Discovery of the repositories a project works on."""

from __future__ import annotations

import fnmatch
import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from bosun.config import Config

__all__ = [
    "Repository",
    "RepositoryError",
    "resolve_repositories",
    "filter_repositories",
    "repository_names",
    "workspace_root",
]

_MAGIC = re.compile(r"[*?\[]")


class RepositoryError(ValueError):
    """Repositories or workspaces could not be resolved from the configuration."""


@dataclass(frozen=True)
class Repository:
    """A local repository: its directory name and absolute path."""

    name: str
    path: Path


def _has_magic(pattern: str) -> bool:
    return _MAGIC.search(pattern) is not None


def _glob(pattern: str) -> list[str]:
    """Expand a glob; ``*`` also matches names that start with a dot.

    Matches within each directory come back sorted.
    """
    if not _has_magic(pattern):
        return [pattern] if os.path.lexists(pattern) else []

    directory, base = os.path.split(pattern)
    if _has_magic(directory):
        directories = _glob(directory)
    else:
        directories = [directory]

    matches: list[str] = []
    for parent in directories:
        try:
            entries = sorted(os.listdir(parent or "."))
        except OSError:
            continue
        for entry in entries:
            if fnmatch.fnmatchcase(entry, base):
                matches.append(os.path.join(parent, entry) if parent else entry)
    return matches


def _format_names(names: Iterable[str]) -> str:
    return "[" + " ".join(names) + "]"


def repository_names(repositories: Iterable[Repository]) -> str:
    """Return the repositories' names joined by ", "."""
    return ", ".join(repository.name for repository in repositories)


def filter_repositories(
    repositories: Sequence[Repository], filter_names: Iterable[str] | None
) -> list[Repository]:
    """Keep the repositories whose names are in ``filter_names``, in their order.

    An empty or missing filter keeps every repository. Raises
    RepositoryError when a filter is given and nothing matches it.
    """
    names = list(filter_names or [])
    if not names:
        return list(repositories)
    wanted = set(names)
    selected = [repository for repository in repositories if repository.name in wanted]
    if not selected:
        raise RepositoryError(
            f"no repositories matched filter {_format_names(names)} "
            f"(available: {repository_names(repositories)})"
        )
    return selected


def resolve_repositories(
    patterns: Iterable[str],
    filter_names: Iterable[str] | None = None,
    project_root: str | os.PathLike[str] | None = None,
) -> list[Repository]:
    """Expand repository globs into directories that hold a .git entry.

    Relative patterns are taken against ``project_root`` when one is given.
    Each directory appears once, in the order the patterns find it.
    Raises RepositoryError when no patterns are given, when the filter
    matches nothing, or when no repository is found.
    """
    pattern_list = list(patterns)
    if not pattern_list:
        raise RepositoryError(
            "no repository patterns configured: set repositories in .bosun/config.yaml"
        )

    root = os.fspath(project_root) if project_root is not None else ""
    repositories: list[Repository] = []
    seen: set[str] = set()

    for pattern in pattern_list:
        if not os.path.isabs(pattern) and root:
            pattern = os.path.join(root, pattern)

        for match in _glob(pattern):
            absolute = os.path.abspath(match)
            if not os.path.isdir(absolute):
                continue
            if not os.path.exists(os.path.join(absolute, ".git")):
                continue
            if absolute in seen:
                continue
            seen.add(absolute)
            repositories.append(
                Repository(name=os.path.basename(absolute), path=Path(absolute))
            )

    repositories = filter_repositories(repositories, filter_names)

    if not repositories:
        raise RepositoryError("no repositories found matching configured patterns")
    return repositories


def workspace_root(config: Config, project_root: str | os.PathLike[str] | None) -> Path:
    """Return the configured workspace root, made absolute against the project root.

    Raises RepositoryError outside a project or when workspace_root is unset.
    """
    if project_root is None or os.fspath(project_root) == "":
        raise RepositoryError("not inside a bosun project (no .bosun/ directory found)")

    root = config.get_string("workspace_root")
    if not root:
        raise RepositoryError("workspaces not configured (set workspace_root in config)")

    path = Path(root)
    if not path.is_absolute():
        path = Path(project_root) / path
    return path