"""Code-hosting data types and semantic version bumping."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = [
    "PullRequest",
    "CreatePRRequest",
    "Release",
    "CreateReleaseRequest",
    "Host",
    "derive_next_version",
]

_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class PullRequest:
    """A pull request on a code hosting platform.

    ``state`` is "open", "closed" or "merged"; ``review`` is "approved",
    "changes_requested", "pending" or empty.
    """

    number: int = 0
    title: str = ""
    body: str = ""
    url: str = ""
    state: str = ""
    review: str = ""


@dataclass
class CreatePRRequest:
    """The fields needed to open a pull request."""

    owner: str = ""
    repository: str = ""
    head: str = ""
    base: str = ""
    title: str = ""
    body: str = ""
    draft: bool = False


@dataclass
class Release:
    """A release (tag) on a code hosting platform."""

    tag: str = ""
    url: str = ""


@dataclass
class CreateReleaseRequest:
    """The fields needed to create a release."""

    owner: str = ""
    repository: str = ""
    tag: str = ""
    target: str = ""
    name: str = ""
    body: str = ""


class Host(ABC):
    """Code hosting operations."""

    @abstractmethod
    def create_pr(self, request: CreatePRRequest) -> PullRequest:
        """Open a pull request, returning the existing one for the head branch if any."""

    @abstractmethod
    def get_pr_for_branch(self, owner: str, repository: str, branch: str) -> PullRequest:
        """Return the pull request for a head branch; number 0 when there is none."""

    @abstractmethod
    def request_reviewers(
        self,
        owner: str,
        repository: str,
        number: int,
        reviewers: list[str],
        team_reviewers: list[str],
    ) -> None:
        """Request reviews from users and/or teams on a pull request."""

    @abstractmethod
    def add_assignees(self, owner: str, repository: str, number: int, assignees: list[str]) -> None:
        """Add assignees to a pull request."""

    @abstractmethod
    def get_authenticated_user(self) -> str:
        """Return the login of the authenticated user."""

    @abstractmethod
    def list_branches(self, owner: str, repository: str) -> list[str]:
        """Return the branch names of a repository."""

    @abstractmethod
    def list_collaborators(self, owner: str, repository: str) -> list[str]:
        """Return the users who can review or be assigned to pull requests."""

    @abstractmethod
    def list_teams(self, owner: str) -> list[str]:
        """Return the team slugs of an organisation."""

    @abstractmethod
    def create_release(self, request: CreateReleaseRequest) -> Release:
        """Create a release with a new tag."""

    @abstractmethod
    def get_latest_tag(self, owner: str, repository: str) -> str:
        """Return the most recent semver tag, or an empty string."""


def _parse_int(text: str, part: str, current: str) -> int:
    if not _INT.fullmatch(text):
        raise ValueError(f"invalid {part} version in {current!r}: {text!r} is not a number")
    return int(text)


def derive_next_version(current: str, bump: str) -> str:
    """Increment a semver tag by ``bump`` ("patch", "minor", "major" or "" for patch).

    An empty ``current`` counts as v0.0.0. Raises ValueError on a malformed
    tag or an unknown bump level.
    """
    major = minor = patch = 0

    if current:
        version = current[1:] if current.startswith("v") else current
        parts = version.split(".", 2)
        if len(parts) != 3:
            raise ValueError(f"invalid semver: {current!r}")
        major = _parse_int(parts[0], "major", current)
        minor = _parse_int(parts[1], "minor", current)
        # A pre-release suffix such as "3-beta.1" is dropped.
        patch = _parse_int(parts[2].split("-", 1)[0], "patch", current)

    if bump == "major":
        major, minor, patch = major + 1, 0, 0
    elif bump == "minor":
        minor, patch = minor + 1, 0
    elif bump in ("patch", ""):
        patch += 1
    else:
        raise ValueError(f"invalid bump level: {bump!r} (use patch, minor, or major)")

    return f"v{major}.{minor}.{patch}"