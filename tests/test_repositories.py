from pathlib import Path

import pytest

from bosun.config import Config
from bosun.repositories import (
    Repository,
    RepositoryError,
    filter_repositories,
    repository_names,
    resolve_repositories,
    workspace_root,
)


def make_repo(parent: Path, name: str, git_file: bool = False) -> Path:
    path = parent / name
    path.mkdir(parents=True)
    if git_file:
        (path / ".git").write_text("gitdir: elsewhere\n")
    else:
        (path / ".git").mkdir()
    return path


@pytest.fixture
def project(tmp_path):
    make_repo(tmp_path, "beta")
    make_repo(tmp_path, "alpha")
    make_repo(tmp_path, "gamma", git_file=True)
    (tmp_path / "plain").mkdir()
    (tmp_path / "notes.txt").write_text("x")
    return tmp_path


def test_resolves_only_git_directories_in_sorted_order(project):
    repos = resolve_repositories([str(project / "*")])
    assert [r.name for r in repos] == ["alpha", "beta", "gamma"]
    assert all(r.path.is_absolute() for r in repos)
    assert repos[0].path == project / "alpha"


def test_relative_pattern_uses_project_root(project):
    repos = resolve_repositories(["./*"], project_root=project)
    assert [r.name for r in repos] == ["alpha", "beta", "gamma"]


def test_duplicate_matches_are_removed(project):
    repos = resolve_repositories([str(project / "*"), str(project / "alpha")])
    names = [r.name for r in repos]
    assert names.count("alpha") == 1
    assert len(names) == 3


def test_literal_pattern_without_git_is_skipped(project):
    with pytest.raises(RepositoryError, match="no repositories found matching configured patterns"):
        resolve_repositories([str(project / "plain")])


def test_star_matches_dot_directories(tmp_path):
    make_repo(tmp_path, ".hidden")
    repos = resolve_repositories([str(tmp_path / "*")])
    assert [r.name for r in repos] == [".hidden"]


def test_empty_patterns_raise():
    with pytest.raises(RepositoryError, match="no repository patterns configured"):
        resolve_repositories([])


def test_filter_names_select_repositories(project):
    repos = resolve_repositories([str(project / "*")], filter_names=["gamma", "alpha"])
    assert [r.name for r in repos] == ["alpha", "gamma"]


def test_filter_without_match_lists_available(project):
    with pytest.raises(RepositoryError) as excinfo:
        resolve_repositories([str(project / "*")], filter_names=["nope"])
    message = str(excinfo.value)
    assert "no repositories matched filter [nope]" in message
    assert "alpha, beta, gamma" in message


def test_filter_repositories_empty_filter_keeps_all():
    repos = [Repository("a", Path("/a")), Repository("b", Path("/b"))]
    assert filter_repositories(repos, None) == repos
    assert filter_repositories(repos, []) == repos


def test_filter_repositories_keeps_original_order():
    repos = [Repository("a", Path("/a")), Repository("b", Path("/b")), Repository("c", Path("/c"))]
    assert filter_repositories(repos, ["c", "a"]) == [repos[0], repos[2]]


def test_repository_names_joins_with_comma():
    repos = [Repository("a", Path("/a")), Repository("b", Path("/b"))]
    assert repository_names(repos) == "a, b"
    assert repository_names([]) == ""


def test_workspace_root_relative_is_joined(tmp_path):
    config = Config({"workspace_root": "_workspaces"}, environ={})
    assert workspace_root(config, tmp_path) == tmp_path / "_workspaces"


def test_workspace_root_absolute_is_kept(tmp_path):
    target = tmp_path / "elsewhere"
    config = Config({"workspace_root": str(target)}, environ={})
    assert workspace_root(config, tmp_path / "project") == target


def test_workspace_root_requires_project():
    config = Config({"workspace_root": "_workspaces"}, environ={})
    with pytest.raises(RepositoryError, match="not inside a bosun project"):
        workspace_root(config, None)


def test_workspace_root_requires_setting(tmp_path):
    config = Config({}, environ={})
    with pytest.raises(RepositoryError, match="workspaces not configured"):
        workspace_root(config, tmp_path)


def test_workspace_root_from_environment(tmp_path):
    config = Config({}, environ={"BOSUN_WORKSPACE_ROOT": "ws"})
    assert workspace_root(config, tmp_path) == tmp_path / "ws"