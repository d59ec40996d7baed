"""Identify the owner and name of a repository from its git remote."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from os import PathLike

__all__ = ["RepositoryIdentity", "parse_remote", "parse_remote_url"]

_SSH_PATTERN = re.compile(r"git@[^:]+:([^/]+)/([^/]+?)(?:\.git)?")
_HTTPS_PATTERN = re.compile(r"https?://[^/]+/([^/]+)/([^/]+?)(?:\.git)?")


@dataclass(frozen=True)
class RepositoryIdentity:
    """Owner and name of a hosted repository."""

    owner: str
    name: str


def parse_remote(repository_path: str | PathLike[str]) -> RepositoryIdentity:
    """Read the origin remote of a local repository and parse it.

    Raises RuntimeError when git cannot report the remote and ValueError
    when the URL cannot be parsed.
    """
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            cwd=repository_path,
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, OSError) as exc:
        raise RuntimeError(f"getting remote URL: {exc}") from exc
    return parse_remote_url(result.stdout.strip())


def parse_remote_url(raw_url: str) -> RepositoryIdentity:
    """Parse an SSH or HTTP(S) remote URL into owner and repository name."""
    for pattern in (_SSH_PATTERN, _HTTPS_PATTERN):
        match = pattern.fullmatch(raw_url)
        if match:
            return RepositoryIdentity(owner=match.group(1), name=match.group(2))
    raise ValueError(f"cannot parse GitHub remote URL: {raw_url!r}")