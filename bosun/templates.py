"""Rendering of ``{{.Field}}`` templates for pull requests and stage URLs."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from bosun.config import Config

__all__ = [
    "PRTemplateData",
    "TemplateError",
    "render",
    "build_pr_title",
    "build_pr_body",
    "render_stage_url",
]

DEFAULT_PR_TITLE_TEMPLATE = "[{{.IssueKey}}] {{.IssueTitle}}"

_FIELD = re.compile(r"\.([A-Za-z_][A-Za-z0-9_]*)")
_ACRONYMS = {"url": "URL", "id": "ID"}
_TRIM_CHARS = " \t\r\n"


class TemplateError(ValueError):
    """A template could not be parsed or executed."""


@dataclass
class PRTemplateData:
    """Fields available to pull request title and body templates."""

    issue_key: str = ""
    issue_title: str = ""
    issue_type: str = ""
    issue_url: str = ""
    branch: str = ""
    base_branch: str = ""


def _template_name(field_name: str) -> str:
    return "".join(_ACRONYMS.get(part, part.capitalize()) for part in field_name.split("_"))


def _template_fields(data: Any) -> Mapping[str, Any]:
    if isinstance(data, Mapping):
        return data
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {
            _template_name(f.name): getattr(data, f.name) for f in dataclasses.fields(data)
        }
    raise TemplateError(f"cannot use {type(data).__name__} as template data")


def _format(value: Any) -> str:
    if value is None:
        return "<no value>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse(pattern: str) -> list[tuple[bool, str]]:
    """Split a template into (is_text, text_or_field_name) pieces."""
    pieces: list[tuple[bool, str]] = []
    position = 0
    trim_next = False
    while True:
        start = pattern.find("{{", position)
        text = pattern[position:] if start < 0 else pattern[position:start]
        if trim_next:
            text = text.lstrip(_TRIM_CHARS)
            trim_next = False
        if start < 0:
            pieces.append((True, text))
            return pieces

        end = pattern.find("}}", start + 2)
        if end < 0:
            raise TemplateError("unclosed action")
        inner = pattern[start + 2 : end]
        position = end + 2

        if len(inner) >= 2 and inner[0] == "-" and inner[1] in _TRIM_CHARS:
            text = text.rstrip(_TRIM_CHARS)
            inner = inner[1:]
        if len(inner) >= 2 and inner[-1] == "-" and inner[-2] in _TRIM_CHARS:
            trim_next = True
            inner = inner[:-1]
        pieces.append((True, text))

        body = inner.strip(_TRIM_CHARS)
        if body.startswith("/*") and body.endswith("*/") and len(body) >= 4:
            continue
        match = _FIELD.fullmatch(body)
        if match is None:
            raise TemplateError(f"unsupported action: {{{{{body}}}}}")
        pieces.append((False, match.group(1)))


def render(pattern: str, data: Any) -> str:
    """Render a template whose actions are ``{{.Field}}`` and ``{{/* comments */}}``.

    ``data`` is a mapping of field names or a dataclass, whose snake_case
    fields are addressed in CamelCase (``issue_url`` as ``.IssueURL``).
    Trim markers ``{{-`` and ``-}}`` drop the adjacent whitespace. Raises
    TemplateError on a malformed template or an unknown field.
    """
    pieces = _parse(pattern)
    fields = _template_fields(data)
    out: list[str] = []
    for is_text, value in pieces:
        if is_text:
            out.append(value)
        elif value in fields:
            out.append(_format(fields[value]))
        else:
            raise TemplateError(f"can't evaluate field {value}")
    return "".join(out)


def build_pr_title(config: Config, data: PRTemplateData) -> str:
    """Render the configured pull request title, falling back to "[KEY] title"."""
    pattern = config.get_string("pull_request.title_template") or DEFAULT_PR_TITLE_TEMPLATE
    try:
        return render(pattern, data)
    except TemplateError:
        return f"[{data.issue_key}] {data.issue_title}"


def build_pr_body(config: Config, data: PRTemplateData) -> str:
    """Render the configured pull request body; empty when unset or broken."""
    pattern = config.get_string("pull_request.body_template")
    if not pattern:
        return ""
    try:
        return render(pattern, data)
    except TemplateError:
        return ""


def render_stage_url(config: Config, stage: str, name: str) -> str:
    """Render a stage's ``url_template`` with ``.Name``; empty when unset or broken."""
    pattern = config.get_string(f"github_actions.workflows.{stage}.url_template")
    if not pattern:
        return ""
    try:
        return render(pattern, {"Name": name})
    except TemplateError:
        return ""