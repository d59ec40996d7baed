"""GitHub REST API v3 implementation of the code host interface."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from typing import Any

import requests

from bosun.code import CreatePRRequest, CreateReleaseRequest, Host, PullRequest, Release

__all__ = ["GitHubError", "GitHubAdapter", "resolve_token", "next_page_path"]

DEFAULT_BASE_URL = "https://api.github.com"
_SEMVER_TAG = re.compile(r"v?\d+\.\d+\.\d+")
_TOKEN_TIMEOUT = 2.0


class GitHubError(RuntimeError):
    """A failed GitHub API call; ``status`` holds the HTTP status when there was one."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


def resolve_token() -> str:
    """Find a GitHub token from ``gh auth token``, then $GITHUB_TOKEN; empty if neither."""
    if shutil.which("gh"):
        try:
            result = subprocess.run(
                ["gh", "auth", "token"],
                capture_output=True,
                text=True,
                timeout=_TOKEN_TIMEOUT,
                check=True,
            )
        except (subprocess.SubprocessError, OSError):
            pass
        else:
            token = result.stdout.strip()
            if token:
                return token
    return os.environ.get("GITHUB_TOKEN", "")


def next_page_path(link: str) -> str:
    """Return the path and query of the rel="next" URL in a Link header, or ""."""
    for part in link.split(","):
        if 'rel="next"' not in part:
            continue
        start = part.find("<")
        end = part.find(">")
        if start < 0 or end < 0 or end <= start:
            continue
        raw_url = part[start + 1 : end]
        scheme_end = raw_url.find("://")
        if scheme_end >= 0:
            rest = raw_url[scheme_end + 3 :]
            slash = rest.find("/")
            if slash >= 0:
                return rest[slash:]
    return ""


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


class GitHubAdapter(Host):
    """Code host backed by the GitHub REST API."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, context: str, body: Any = None) -> requests.Response:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/vnd.github+json",
        }
        try:
            response = self.session.request(
                method, self.base_url + path, headers=headers, json=body
            )
        except requests.RequestException as exc:
            raise GitHubError(f"{context}: executing request: {exc}") from exc
        if response.status_code >= 400:
            raise GitHubError(
                f"{context}: github API error (HTTP {response.status_code}): {response.text}",
                status=response.status_code,
            )
        return response

    @staticmethod
    def _decode(response: requests.Response, what: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubError(f"parsing {what} response: {exc}") from exc

    def _paginate(self, path: str, context: str, what: str, field: str) -> list[str]:
        values: list[str] = []
        while path:
            response = self._request("GET", path, context)
            page = self._decode(response, what)
            if not isinstance(page, list):
                raise GitHubError(f"parsing {what} response: expected a list")
            values.extend(_text(item.get(field)) for item in page if isinstance(item, dict))
            path = next_page_path(response.headers.get("Link", ""))
        return values

    def create_pr(self, request: CreatePRRequest) -> PullRequest:
        existing = self.get_pr_for_branch(request.owner, request.repository, request.head)
        if existing.number > 0:
            return existing

        body = {
            "title": request.title,
            "body": request.body,
            "head": request.head,
            "base": request.base,
            "draft": request.draft,
        }
        path = f"/repos/{request.owner}/{request.repository}/pulls"
        result = self._decode(self._request("POST", path, "creating PR", body), "PR")
        if not isinstance(result, dict):
            raise GitHubError("parsing PR response: expected an object")
        return PullRequest(
            number=int(result.get("number") or 0),
            title=_text(result.get("title")),
            body=_text(result.get("body")),
            url=_text(result.get("html_url")),
            state=_text(result.get("state")),
        )

    def get_pr_for_branch(self, owner: str, repository: str, branch: str) -> PullRequest:
        path = f"/repos/{owner}/{repository}/pulls?head={owner}:{branch}&state=all"
        results = self._decode(
            self._request("GET", path, "fetching PR for branch"), "PR list"
        )
        if not isinstance(results, list):
            raise GitHubError("parsing PR list response: expected a list")
        if not results:
            return PullRequest()

        pr = results[0]
        state = _text(pr.get("state"))
        if pr.get("merged_at") is not None:
            state = "merged"
        return PullRequest(
            number=int(pr.get("number") or 0),
            title=_text(pr.get("title")),
            body=_text(pr.get("body")),
            url=_text(pr.get("html_url")),
            state=state,
        )

    def create_release(self, request: CreateReleaseRequest) -> Release:
        body = {
            "tag_name": request.tag,
            "target_commitish": request.target,
            "name": request.name,
            "body": request.body,
        }
        path = f"/repos/{request.owner}/{request.repository}/releases"
        result = self._decode(self._request("POST", path, "creating release", body), "release")
        if not isinstance(result, dict):
            raise GitHubError("parsing release response: expected an object")
        return Release(tag=_text(result.get("tag_name")), url=_text(result.get("html_url")))

    def get_latest_tag(self, owner: str, repository: str) -> str:
        path = f"/repos/{owner}/{repository}/tags?per_page=100"
        tags = self._decode(self._request("GET", path, "fetching tags"), "tags")
        if not isinstance(tags, list):
            raise GitHubError("parsing tags response: expected a list")
        for tag in tags:
            name = _text(tag.get("name")) if isinstance(tag, dict) else ""
            if _SEMVER_TAG.match(name):
                return name
        return ""

    def list_branches(self, owner: str, repository: str) -> list[str]:
        return self._paginate(
            f"/repos/{owner}/{repository}/branches?per_page=100",
            "listing branches",
            "branches",
            "name",
        )

    def list_collaborators(self, owner: str, repository: str) -> list[str]:
        return self._paginate(
            f"/repos/{owner}/{repository}/collaborators?per_page=100",
            "listing collaborators",
            "collaborators",
            "login",
        )

    def list_teams(self, owner: str) -> list[str]:
        return self._paginate(
            f"/orgs/{owner}/teams?per_page=100", "listing teams", "teams", "slug"
        )

    def request_reviewers(
        self,
        owner: str,
        repository: str,
        number: int,
        reviewers: list[str],
        team_reviewers: list[str],
    ) -> None:
        body: dict[str, list[str]] = {}
        if reviewers:
            body["reviewers"] = list(reviewers)
        if team_reviewers:
            body["team_reviewers"] = list(team_reviewers)
        path = f"/repos/{owner}/{repository}/pulls/{number}/requested_reviewers"
        self._request("POST", path, "requesting reviewers", body)

    def add_assignees(self, owner: str, repository: str, number: int, assignees: list[str]) -> None:
        path = f"/repos/{owner}/{repository}/issues/{number}/assignees"
        self._request("POST", path, "adding assignees", {"assignees": list(assignees)})

    def get_authenticated_user(self) -> str:
        result = self._decode(
            self._request("GET", "/user", "getting authenticated user"), "user"
        )
        if not isinstance(result, dict):
            raise GitHubError("parsing user response: expected an object")
        return _text(result.get("login"))