"""CI workflow targets and service names taken from the configuration."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from bosun.config import Config
from bosun.remote import RepositoryIdentity, parse_remote
from bosun.repositories import Repository

__all__ = [
    "WorkflowTarget",
    "parse_workflow_path",
    "resolve_workflow_targets",
    "resolve_repo_service_names",
    "stage_input_name",
]

_RELATIVE_PREFIX = ".github/"
_SHARED_KEY = "_shared"

RemoteLookup = Callable[["str | os.PathLike[str]"], RepositoryIdentity]


@dataclass(frozen=True)
class WorkflowTarget:
    """A workflow to trigger: its repository, workflow file and display label."""

    owner: str
    repo: str
    workflow: str
    label: str


def parse_workflow_path(path: str) -> WorkflowTarget:
    """Parse ``owner/repo/.github/workflows/file.yml`` into a target.

    Raises ValueError when the owner or repository part is missing.
    """
    parts = path.split("/", 2)
    if len(parts) < 3 or not parts[0] or not parts[1]:
        raise ValueError(
            f"invalid workflow path {path!r}: expected owner/repo/.github/workflows/file.yml"
        )
    return WorkflowTarget(
        owner=parts[0],
        repo=parts[1],
        workflow=path.rsplit("/", 1)[-1],
        label=parts[1],
    )


def _workflow_paths(value: Any) -> list[str] | None:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return None


def resolve_workflow_targets(
    config: Config,
    stage: str,
    repositories: Iterable[Repository],
    remote_lookup: RemoteLookup | None = None,
) -> list[WorkflowTarget]:
    """Resolve the workflow targets configured for a lifecycle stage.

    A string target is one global workflow. A mapping is keyed by local
    repository name; only keys naming one of ``repositories`` are used, and
    each value is a path or a list of paths. Paths starting with ``.github/``
    are made absolute from the repository's origin remote; repositories
    whose remote or path cannot be resolved are skipped. Returns an empty
    list when the stage has no target.
    """
    key = f"github_actions.workflows.{stage}.target"

    single = config.get_string(key)
    if single:
        return [parse_workflow_path(single)]

    raw = config.get(key)
    if not isinstance(raw, dict):
        return []

    lookup = remote_lookup if remote_lookup is not None else parse_remote
    by_name = {repository.name: repository for repository in repositories}

    targets: list[WorkflowTarget] = []
    for repo_name, value in raw.items():
        repository = by_name.get(repo_name)
        if repository is None:
            continue
        paths = _workflow_paths(value)
        if paths is None:
            continue

        for path in paths:
            if path.startswith(_RELATIVE_PREFIX):
                try:
                    identity = lookup(repository.path)
                except (RuntimeError, ValueError, OSError):
                    continue
                path = f"{identity.owner}/{identity.name}/{path}"
            try:
                target = parse_workflow_path(path)
            except ValueError:
                continue
            targets.append(
                WorkflowTarget(
                    owner=target.owner,
                    repo=target.repo,
                    workflow=target.workflow,
                    label=repo_name,
                )
            )
    return targets


def resolve_repo_service_names(config: Config, repo_name: str) -> list[str]:
    """Return the service names of a repository.

    The ``services.<repo>`` value may be a string, a list of strings or a
    mapping whose keys (other than ``_shared``) are the names. When it is
    not set, the repository name is the service name.
    """
    raw = config.get(f"services.{repo_name}")
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        return [item for item in raw if isinstance(item, str)]
    if isinstance(raw, dict):
        return [name for name in raw if name != _SHARED_KEY]
    return [repo_name]


def stage_input_name(config: Config, stage: str, concept: str) -> str:
    """Return the workflow input name configured for a concept; empty when unset."""
    return config.get_string(f"github_actions.workflows.{stage}.inputs.{concept}")