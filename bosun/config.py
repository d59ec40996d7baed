"""Layered configuration: global file, project file and environment."""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any

import yaml

__all__ = ["Config", "global_config_dir", "find_project_root", "load"]

_PROJECT_DIR = ".bosun"
_CONFIG_FILES = ("config.yaml", "config.yml")


def _normalise(value: Any) -> Any:
    """Lower-case mapping keys recursively, as lookups are case-insensitive."""
    if isinstance(value, Mapping):
        return {str(k).lower(): _normalise(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalise(v) for v in value]
    return value


def _deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            _deep_merge(existing, value)
        else:
            target[key] = value


def _to_string(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Config:
    """Settings looked up by dotted key, with environment overrides.

    An environment variable ``<PREFIX>_<KEY>`` (dots become underscores,
    upper case) takes precedence over file values when it is non-empty.
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
        env_prefix: str = "BOSUN",
    ) -> None:
        self._data: dict[str, Any] = _normalise(dict(data or {}))
        self._environ = os.environ if environ is None else environ
        self._env_prefix = env_prefix

    def _env_value(self, key: str) -> str | None:
        name = key.upper().replace(".", "_")
        if self._env_prefix:
            name = f"{self._env_prefix}_{name}"
        value = self._environ.get(name)
        return value or None

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at a dotted key, or ``default`` when unset."""
        env = self._env_value(key)
        if env is not None:
            return env
        node: Any = self._data
        for part in key.lower().split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_string(self, key: str) -> str:
        """Return the value as a string; empty when unset or not a scalar."""
        return _to_string(self.get(key))

    def get_list(self, key: str) -> list[str]:
        """Return the value as a list of strings.

        A string is split on whitespace; a list has each item converted.
        """
        value = self.get(key)
        if isinstance(value, str):
            return value.split()
        if isinstance(value, list):
            return [_to_string(item) for item in value]
        return []

    def merge(self, other: Mapping[str, Any]) -> None:
        """Deep-merge ``other`` into these settings; its values win."""
        _deep_merge(self._data, _normalise(dict(other)))


def _config_dir(environ: Mapping[str, str]) -> Path:
    xdg = environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "bosun"
    return Path.home() / ".config" / "bosun"


def global_config_dir() -> Path:
    """Return $XDG_CONFIG_HOME/bosun, or ~/.config/bosun when that is unset."""
    return _config_dir(os.environ)


def find_project_root(start: str | os.PathLike[str] | None = None) -> Path | None:
    """Walk up from ``start`` (default: the working directory) to a directory holding .bosun/."""
    try:
        directory = Path(start if start is not None else Path.cwd()).resolve()
    except OSError:
        return None
    for candidate in (directory, *directory.parents):
        if (candidate / _PROJECT_DIR).is_dir():
            return candidate
    return None


def _read_yaml(path: Path, label: str) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as handle:
            content = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise ValueError(f"reading {label} config: {exc}") from exc
    if content is None:
        return {}
    if not isinstance(content, Mapping):
        raise ValueError(f"reading {label} config: {path} does not hold a mapping")
    return dict(content)


def load(
    start: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load the global config, then merge the project's .bosun/config.yaml over it.

    A missing file is not an error; an unreadable or malformed one raises ValueError.
    """
    env: Mapping[str, str] = os.environ if environ is None else environ
    config = Config(environ=env)

    try:
        config_dir: Path | None = _config_dir(env)
    except RuntimeError:
        config_dir = None

    if config_dir is not None:
        for filename in _CONFIG_FILES:
            path = config_dir / filename
            if path.is_file():
                config.merge(_read_yaml(path, "global"))
                break

    project_root = find_project_root(start)
    if project_root is not None:
        project_config = project_root / _PROJECT_DIR / "config.yaml"
        if project_config.exists():
            config.merge(_read_yaml(project_config, "project"))

    return config


# Kept for callers that want a writable view of raw settings.
_ConfigData = MutableMapping[str, Any]