"""Troff man page generation from a command tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TextIO

__all__ = ["Flag", "Command", "ManPageOptions", "write_man_page", "troff_escape"]

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_HIDDEN_COMMANDS = frozenset({"help", "completion"})


@dataclass
class Flag:
    """A command-line flag.

    ``default`` is the textual default value and ``kind`` the value type
    name ("bool", "string", "int", ...).
    """

    name: str
    shorthand: str = ""
    usage: str = ""
    default: str = ""
    kind: str = "string"
    hidden: bool = False
    shorthand_deprecated: str = ""


@dataclass
class Command:
    """A node in a command tree; ``use`` starts with the command's name."""

    use: str
    short: str = ""
    long: str = ""
    hidden: bool = False
    flags: list[Flag] = field(default_factory=list)
    persistent_flags: list[Flag] = field(default_factory=list)
    commands: list[Command] = field(default_factory=list)

    @property
    def name(self) -> str:
        parts = self.use.split()
        return parts[0] if parts else ""

    def add_command(self, *args: Command) -> None:
        """Attach subcommands."""
        self.commands.extend(args)

    def visible_subcommands(self) -> list[Command]:
        """Subcommands sorted by name, without hidden, help and completion."""
        return [
            sub
            for sub in sorted(self.commands, key=lambda c: c.name)
            if not sub.hidden and sub.name not in _HIDDEN_COMMANDS
        ]


@dataclass
class ManPageOptions:
    """Header settings; empty fields take their defaults when writing."""

    section: str = ""
    date: str = ""
    source: str = ""
    manual: str = ""


def troff_escape(text: str) -> str:
    """Escape backslashes and hyphens for troff."""
    return text.replace("\\", "\\\\").replace("-", "\\-")


def _quote(text: str) -> str:
    """Double-quote a string with backslash escapes."""
    escapes = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}
    out = []
    for char in text:
        if char in escapes:
            out.append(escapes[char])
        elif not char.isprintable():
            code = ord(char)
            out.append(f"\\x{code:02x}" if code < 0x80 else f"\\u{code:04x}")
        else:
            out.append(char)
    return '"' + "".join(out) + '"'


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def _option_lines(flag: Flag) -> list[str]:
    signature = ""
    if flag.shorthand and not flag.shorthand_deprecated:
        signature += f"\\fB\\-{flag.shorthand}\\fP, "
    signature += f"\\fB\\-\\-{troff_escape(flag.name)}\\fP"
    if flag.kind != "bool":
        signature += f"=\\fI{flag.name.upper()}\\fP"

    usage = _capitalize_first(flag.usage)
    if flag.default not in ("", "false", "0", '""'):
        description = f"{usage} (default: {flag.default})."
    else:
        description = usage + "."
    return [".TP", signature, description]


def write_man_page(out: TextIO, command: Command, options: ManPageOptions | None = None) -> None:
    """Write a troff man page for the tree rooted at ``command`` to ``out``."""
    options = options or ManPageOptions()
    name = command.name
    section = options.section or "1"
    if options.date:
        date = options.date
    else:
        now = datetime.now()
        date = f"{_MONTHS[now.month - 1]} {now.year}"
    source = options.source or name
    manual = options.manual or "User Commands"

    lines = [
        ".nh",
        ".TH " + " ".join(_quote(v) for v in (name.upper(), section, date, source, manual)),
        "",
        ".SH NAME",
        f"{troff_escape(name)} \\- {troff_escape(command.short)}",
        "",
        ".SH SYNOPSIS",
        f"\\fB{troff_escape(name)}\\fP [\\fIflags\\fP] [\\fIcommand\\fP]",
        "",
        ".SH DESCRIPTION",
        troff_escape(command.long or command.short),
        "",
        ".SH OPTIONS",
    ]

    seen: set[str] = set()
    for flags in (command.flags, command.persistent_flags):
        for flag in sorted(flags, key=lambda f: f.name):
            if flag.hidden or flag.name in seen:
                continue
            seen.add(flag.name)
            lines.extend(_option_lines(flag))

    lines += [
        ".TP",
        "\\fB\\-h\\fP, \\fB\\-\\-help\\fP",
        "Display help and exit.",
        ".TP",
        "\\fB\\-v\\fP, \\fB\\-\\-version\\fP",
        "Display version and exit.",
    ]

    subcommands = command.visible_subcommands()
    if subcommands:
        lines += ["", ".SH COMMANDS"]
        for sub in subcommands:
            lines += [
                ".TP",
                f"\\fB{troff_escape(sub.name)}\\fP",
                troff_escape(sub.short or "(no description)"),
            ]

    lines += [
        "",
        ".SH EXIT STATUS",
        ".TP",
        "0",
        "Success.",
        ".TP",
        "1",
        "An error occurred.",
        "",
        ".SH SEE ALSO",
        "\\fBbash\\fP(1), \\fBzsh\\fP(1), \\fBfish\\fP(1)",
    ]

    for line in lines:
        out.write(line + "\n")