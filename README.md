# bosun

A library of building blocks for an issue-driven git workflow. It can:

- find the git repositories that belong to a project;
- work with GitHub pull requests, releases, tags, branches, collaborators
  and teams;
- read the owner and name of a repository from its `origin` remote;
- bump semantic version tags;
- render the templates for pull request titles, pull request bodies and
  stage URLs;
- pick CI workflow targets and service names out of the configuration;
- write troff man pages for a command tree.

## Install

```
pip install .
pip install ".[test]"   # adds pytest and responses
```

## Configuration (`bosun.config`)

`load(start=None, environ=None)` returns a `Config` built in this order:

1. The global file. This is `config.yaml`, or `config.yml` if there is no
   `config.yaml`, in `$XDG_CONFIG_HOME/bosun`. When that variable is not
   set, the directory is `~/.config/bosun`. `global_config_dir()` returns
   this directory.
2. The project's `.bosun/config.yaml`, deep-merged over the global file. The
   project root is found by `find_project_root(start)`, which walks up from
   `start` (by default the working directory) to the first directory that
   holds a `.bosun/` directory.

A missing file is not an error. A file that cannot be read, is not valid
YAML, or does not hold a mapping raises `ValueError`.

Keys are dotted and case-insensitive. For any key, a non-empty environment
variable `BOSUN_<KEY>` wins over the files. The dots in the key become
underscores and the name is upper-cased, so `github.token` is read from
`BOSUN_GITHUB_TOKEN`.

```python
from bosun.config import load

config = load()
patterns = config.get_list("repositories")    # a string is split on whitespace
root = config.get_string("workspace_root")    # "" when unset
raw = config.get("services", default={})
config.merge({"workspace_root": "_workspaces"})
```

## Versions (`bosun.code`)

`derive_next_version(current, bump)` bumps a semver tag. `bump` is
`"patch"`, `"minor"` or `"major"`, and an empty string counts as `"patch"`.
An empty `current` counts as `v0.0.0`. A leading `v` is optional, and a
pre-release suffix on the patch number is dropped. The function raises
`ValueError` on a malformed tag or an unknown bump level.

```python
from bosun.code import derive_next_version

derive_next_version("v1.2.3", "minor")        # "v1.3.0"
derive_next_version("v1.2.3-beta.1", "patch") # "v1.2.4"
derive_next_version("", "major")              # "v1.0.0"
```

The same module defines the data classes `PullRequest`, `CreatePRRequest`,
`Release` and `CreateReleaseRequest`. It also defines the abstract `Host`
interface that a code host implements.

## GitHub (`bosun.github`)

`GitHubAdapter(token, base_url=..., session=None)` implements `Host` over
the GitHub REST API. It uses `requests`, and you can pass in a session of
your own.

```python
from bosun.code import CreatePRRequest
from bosun.github import GitHubAdapter, resolve_token

adapter = GitHubAdapter(resolve_token())
pr = adapter.create_pr(CreatePRRequest(
    owner="org", repository="repo", head="feature/x", base="main", title="[PROJ-1] X",
))
print(pr.number, pr.url, pr.state)
```

- `create_pr` is idempotent. If a pull request already exists for the head
  branch, it returns that one.
- `get_pr_for_branch` returns a `PullRequest` with `number == 0` when there
  is none. It reports a merged pull request with state `"merged"`.
- `get_latest_tag` returns the first tag whose name looks like a semver
  version, or `""` if there is none.
- `list_branches`, `list_collaborators` and `list_teams` follow the
  `rel="next"` links of the `Link` header across pages. `next_page_path`
  extracts those links.
- `create_release`, `request_reviewers`, `add_assignees` and
  `get_authenticated_user` complete the interface.

HTTP errors (status 400 and above), network failures and responses that
cannot be parsed raise `GitHubError`. Its `status` attribute holds the HTTP
status when there was one.

`resolve_token()` tries `gh auth token` first, with a two-second timeout,
and then the `GITHUB_TOKEN` environment variable. It returns `""` if
neither gives a token.

## Remotes (`bosun.remote`)

`parse_remote_url` accepts SSH (`git@host:owner/name.git`) and HTTP(S)
(`https://host/owner/name.git`) URLs. The `.git` suffix is optional. The
function returns a `RepositoryIdentity(owner, name)` and raises `ValueError`
for anything else.

`parse_remote(path)` runs `git remote get-url origin` in a checkout and
parses the result. If git fails, it raises `RuntimeError`.

## Repositories (`bosun.repositories`)

- `resolve_repositories(patterns, filter_names=None, project_root=None)`
  expands glob patterns into directories that contain a `.git` entry.
  Relative patterns are joined to `project_root`. Each repository is
  returned once, as a `Repository(name, path)`, in the order the patterns
  find it.
- `filter_repositories(repositories, filter_names)` keeps only the named
  repositories.
- `repository_names(repositories)` joins their names with `", "`.
- `workspace_root(config, project_root)` returns the configured
  `workspace_root` as an absolute path.

Each of these raises `RepositoryError` (a `ValueError`) when there is
nothing to work with: no patterns, no match for the filter, no repository
found, no project root, or no `workspace_root` set.

## Workflows (`bosun.workflows`)

- `parse_workflow_path("owner/repo/.github/workflows/deploy.yml")` returns a
  `WorkflowTarget(owner, repo, workflow, label)`.
- `resolve_workflow_targets(config, stage, repositories, remote_lookup=None)`
  reads `github_actions.workflows.<stage>.target`. The value is one of:
  - a single path, which gives one global target;
  - a mapping keyed by repository name, whose values are a path or a list
    of paths. Only the repositories you pass are used. A path that starts
    with `.github/` is made absolute from that repository's `origin`
    remote. `remote_lookup` replaces the remote lookup, which is handy in
    tests.
- `resolve_repo_service_names(config, repo_name)` reads `services.<repo>`.
  The value may be a string, a list, or a mapping whose keys other than
  `_shared` are the names. When the key is unset, the result is
  `[repo_name]`.
- `stage_input_name(config, stage, concept)` reads
  `github_actions.workflows.<stage>.inputs.<concept>`.

## Templates (`bosun.templates`)

`render(pattern, data)` supports these actions:

- `{{.Field}}` inserts a field;
- `{{/* comment */}}` is dropped from the output;
- the trim markers `{{-` and `-}}` remove the whitespace next to them.

`data` is either a mapping or a dataclass. The snake_case fields of a
dataclass are addressed in CamelCase, so `issue_url` becomes `.IssueURL`.
Anything else raises `TemplateError`.

- `build_pr_title(config, PRTemplateData(...))` uses
  `pull_request.title_template`. It defaults to
  `[{{.IssueKey}}] {{.IssueTitle}}` and falls back to `[KEY] title` if the
  template fails.
- `build_pr_body(config, data)` uses `pull_request.body_template`. It
  returns `""` when the template is unset or broken.
- `render_stage_url(config, stage, name)` renders
  `github_actions.workflows.<stage>.url_template` with `.Name`. It also
  returns `""` when the template is unset or broken.

## Man pages (`bosun.manpage`)

Build a tree of `Command` and `Flag` objects and pass the root to
`write_man_page`:

```python
import sys
from bosun.manpage import Command, Flag, ManPageOptions, write_man_page

root = Command(use="deploy", short="A deployment tool")
root.flags.append(Flag(name="config", shorthand="c", usage="config file path"))
root.add_command(Command(use="push", short="Deploy the application"))
write_man_page(sys.stdout, root, ManPageOptions(date="Jan 2026"))
```

The page has these sections: NAME, SYNOPSIS, DESCRIPTION, OPTIONS, COMMANDS,
EXIT STATUS and SEE ALSO. COMMANDS is left out when there are no visible
subcommands. Hidden subcommands and the `help` and `completion` subcommands
are never listed. `troff_escape` escapes backslashes and hyphens.

## What this package does not do

This is a library only. It installs no command-line program. It also does
not:

- talk to an issue tracker or a chat service;
- create or remove branches, worktrees or workspaces;
- trigger CI runs;
- prompt the user interactively;
- generate shell completion scripts.

Those parts are left to the code that uses it.