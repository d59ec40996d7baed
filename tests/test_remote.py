import subprocess
from unittest.mock import patch

import pytest

from bosun.remote import RepositoryIdentity, parse_remote, parse_remote_url


@pytest.mark.parametrize(
    "url, owner, name",
    [
        ("git@example.com:myorg/my-service.git", "myorg", "my-service"),
        ("git@example.com:myorg/my-service", "myorg", "my-service"),
        ("https://github.com/myorg/my-service.git", "myorg", "my-service"),
        ("https://github.com/myorg/my-service", "myorg", "my-service"),
        ("http://github.com/myorg/my-service.git", "myorg", "my-service"),
        ("git@example.com:myorg/my-service.git", "myorg", "my-service"),
        ("https://gitlab.com/myorg/my-service.git", "myorg", "my-service"),
    ],
)
def test_parse_remote_url(url, owner, name):
    assert parse_remote_url(url) == RepositoryIdentity(owner=owner, name=name)


@pytest.mark.parametrize("url", ["not-a-url", "", "https://github.com/only-owner"])
def test_parse_remote_url_invalid(url):
    with pytest.raises(ValueError):
        parse_remote_url(url)


def test_parse_remote_reads_origin(tmp_path):
    completed = subprocess.CompletedProcess(
        args=[], returncode=0, stdout="https://github.com/org/repo.git\n", stderr=""
    )
    with patch("bosun.remote.subprocess.run", return_value=completed) as run:
        identity = parse_remote(tmp_path)
    assert identity == RepositoryIdentity(owner="org", name="repo")
    args, kwargs = run.call_args
    assert args[0] == ["git", "remote", "get-url", "origin"]
    assert kwargs["cwd"] == tmp_path


def test_parse_remote_git_failure(tmp_path):
    error = subprocess.CalledProcessError(128, ["git", "remote", "get-url", "origin"])
    with patch("bosun.remote.subprocess.run", side_effect=error):
        with pytest.raises(RuntimeError, match="getting remote URL"):
            parse_remote(tmp_path)