import io

import pytest

from bosun.manpage import Command, Flag, ManPageOptions, troff_escape, write_man_page


def _render(command, options=None):
    buf = io.StringIO()
    write_man_page(buf, command, options)
    return buf.getvalue()


def _deploy_tree():
    root = Command(
        use="deploy",
        short="A deployment tool for managing application releases",
        long="deploy manages application releases across environments.",
    )
    root.persistent_flags.append(
        Flag("verbose", shorthand="v", usage="enable verbose output", default="false", kind="bool")
    )
    root.flags.append(Flag("config", shorthand="c", usage="config file path"))
    root.add_command(
        Command(use="push", short="Deploy the application"),
        Command(use="migrate", short="Apply pending migrations"),
        Command(use="secret", short="Hidden", hidden=True),
    )
    return root


@pytest.mark.parametrize(
    "text",
    [
        '.TH "DEPLOY" "1" "Jan 2026" "deploy" "User Commands"',
        ".SH NAME",
        r"deploy \- A deployment tool",
        ".SH SYNOPSIS",
        ".SH DESCRIPTION",
        ".SH OPTIONS",
        r"\fB\-v\fP, \fB\-\-verbose\fP",
        r"\fB\-c\fP, \fB\-\-config\fP=\fICONFIG\fP",
        r"\fB\-h\fP, \fB\-\-help\fP",
        ".SH COMMANDS",
        r"\fBpush\fP",
        r"\fBmigrate\fP",
        ".SH EXIT STATUS",
        ".SH SEE ALSO",
    ],
)
def test_write_man_page_comprehensive(text):
    got = _render(_deploy_tree(), ManPageOptions(date="Jan 2026"))
    assert text in got


def test_hidden_subcommand_not_listed():
    got = _render(_deploy_tree(), ManPageOptions(date="Jan 2026"))
    assert "secret" not in got


def test_subcommands_sorted_by_name():
    got = _render(_deploy_tree(), ManPageOptions(date="Jan 2026"))
    assert got.index(r"\fBmigrate\fP") < got.index(r"\fBpush\fP")


def test_no_long_falls_back_to_short():
    got = _render(Command(use="tool", short="A small tool"))
    description = got.split(".SH DESCRIPTION\n", 1)[1].split("\n", 1)[0]
    assert description == "A small tool"


def test_no_subcommands_hides_commands_section():
    got = _render(Command(use="leaf", short="Leaf command"))
    assert ".SH COMMANDS" not in got


@pytest.mark.parametrize(
    "text, want",
    [
        ("--verbose", r"\-\-verbose"),
        ("-v", r"\-v"),
        ("plain text", "plain text"),
        ("back\\slash", "back\\\\slash"),
    ],
)
def test_troff_escape(text, want):
    assert troff_escape(text) == want


def test_default_header_values():
    got = _render(Command(use="tool [args]", short="x"), ManPageOptions(date="Mar 2025"))
    assert '.TH "TOOL" "1" "Mar 2025" "tool" "User Commands"' in got


def test_custom_header_values():
    options = ManPageOptions(section="8", date="Feb 2024", source="tool 1.0", manual="Admin")
    got = _render(Command(use="tool", short="x"), options)
    assert '.TH "TOOL" "8" "Feb 2024" "tool 1.0" "Admin"' in got


def test_option_default_value_shown():
    root = Command(use="serve", short="Serve")
    root.flags.append(Flag("port", usage="port to listen on", default="8080", kind="int"))
    got = _render(root, ManPageOptions(date="Jan 2026"))
    assert "Port to listen on (default: 8080).\n" in got
    assert r"\fB\-\-port\fP=\fIPORT\fP" in got


def test_option_zero_default_not_shown():
    root = Command(use="serve", short="Serve")
    root.flags.append(Flag("retries", usage="retry count", default="0", kind="int"))
    got = _render(root, ManPageOptions(date="Jan 2026"))
    assert "Retry count.\n" in got


def test_hidden_and_duplicate_flags_skipped():
    root = Command(use="tool", short="x")
    root.flags.append(Flag("internal", usage="internal only", hidden=True))
    root.flags.append(Flag("name", usage="local name"))
    root.persistent_flags.append(Flag("name", usage="persistent name"))
    got = _render(root, ManPageOptions(date="Jan 2026"))
    assert "internal" not in got
    assert "Local name." in got
    assert "Persistent name." not in got


def test_deprecated_shorthand_omitted():
    root = Command(use="tool", short="x")
    root.flags.append(
        Flag("output", shorthand="o", usage="output", shorthand_deprecated="use --output")
    )
    got = _render(root, ManPageOptions(date="Jan 2026"))
    assert r"\fB\-o\fP" not in got
    assert r"\fB\-\-output\fP=\fIOUTPUT\fP" in got


def test_help_and_completion_commands_excluded():
    root = Command(use="tool", short="x")
    root.add_command(Command(use="help", short="Help"), Command(use="completion", short="Comp"))
    assert root.visible_subcommands() == []
    assert ".SH COMMANDS" not in _render(root, ManPageOptions(date="Jan 2026"))


def test_subcommand_without_short_gets_placeholder():
    root = Command(use="tool", short="x")
    root.add_command(Command(use="bare"))
    got = _render(root, ManPageOptions(date="Jan 2026"))
    assert "(no description)" in got