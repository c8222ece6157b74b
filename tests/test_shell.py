"""Tests for quoting and the shell execution primitive."""

from __future__ import annotations

import shutil
from dataclasses import dataclass

import pytest

from gorewrite.exceptions import CommandError, DecodeError
from gorewrite.shell import (
    CommandLine,
    RunBashOptions,
    bash_command_expr,
    join_args,
    quote,
    quotes,
    run_bash,
    run_bash_with_opts,
)

requires_bash = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")


# ── quote ──


class TestQuote:
    def test_empty(self):
        assert quote("") == "''"

    @pytest.mark.parametrize("s", ["abc", "/usr/local/go", "-o", "a=b", "foo@v1.0", "x,y:z", "-N"])
    def test_safe_strings_unchanged(self, s: str):
        assert quote(s) == s

    @pytest.mark.parametrize("c", list("\t \n;<>\\${}()&!"))
    def test_special_char_triggers_quoting(self, c: str):
        assert quote(f"a{c}b") == f"'a{c}b'"

    def test_embedded_single_quote(self):
        assert quote("it's here") == "'it'\\''s here'"

    def test_single_quote_alone_is_quoted(self):
        assert quote("it's") == "'it'\\''s'"

    def test_exact_trigger_set(self):
        base = "\t \n;<>\\${}()&!"
        extended = "'\"`|*?[#~"
        candidates = {chr(c) for c in range(32, 127)} | {"\t", "\n"}
        quoted = {c for c in candidates if quote(f"a{c}b") != f"a{c}b"}
        assert quoted == set(base) | set(extended)

    def test_glob_is_quoted(self):
        assert quote("*.go") == "'*.go'"

    def test_trim_rule_is_quoted(self):
        assert quote("-trimpath=/a=>/b") == "'-trimpath=/a=>/b'"


@requires_bash
class TestQuoteRoundTrip:
    @pytest.mark.parametrize(
        "s",
        [
            "",
            "plain",
            "with space",
            "tab\there",
            "new\nline",
            "it's",
            "'''",
            "$HOME",
            "${x}",
            "$(whoami)",
            "`id`",
            "a;b && c || d",
            "<in >out",
            "back\\slash",
            "bang!",
            'double "quoted"',
            "*.go",
            "~",
            "#comment",
            "a|b",
            "-trimpath=/tmp/go-rewrite/proj=>/proj;/tmp/go-rewrite/pkg_foo=>/proj/vendor/foo@v1.0",
        ],
    )
    def test_printf_yields_original(self, s: str):
        out = run_bash_with_opts([f"printf '%s' {quote(s)}"], RunBashOptions(need_stdout=True))
        assert out.stdout == s


class TestJoinArgs:
    def test_each_arg_quoted(self):
        assert join_args(["build", "./cmd/app", "my file.go"]) == "build ./cmd/app 'my file.go'"

    def test_empty_list(self):
        assert join_args([]) == ""

    def test_quotes_matches_join_args(self):
        assert quotes("-N", "-l", "a b") == join_args(["-N", "-l", "a b"])


# ── bash_command_expr ──


class TestBashCommandExpr:
    def test_newline_separated(self):
        assert bash_command_expr(["set -e", "cd /x", "ls"]) == "set -e\ncd /x\nls"

    def test_blank_statements_dropped(self):
        assert bash_command_expr(["  ", "echo a", "", "echo b  "]) == "echo a\necho b"

    def test_control_operator_suffix_not_separated(self):
        assert bash_command_expr(["true &&", "echo ok"]) == "true &&echo ok"
        assert bash_command_expr(["false ||", "echo ok"]) == "false ||echo ok"
        assert bash_command_expr(["echo a;", "echo b"]) == "echo a;echo b"

    def test_single_statement(self):
        assert bash_command_expr(["echo hi"]) == "echo hi"

    def test_empty(self):
        assert bash_command_expr([]) == ""


class TestCommandLine:
    def test_render_quotes_each_arg(self):
        cmd = CommandLine(["go", "build"]).add("-o", "/out dir/app")
        assert cmd.render() == "go build -o '/out dir/app'"

    def test_add_flag_is_single_arg(self):
        cmd = CommandLine(["go"]).add_flag("-gcflags", "all=-N -l")
        assert cmd.argv == ["go", "-gcflags=all=-N -l"]
        assert cmd.render() == "go '-gcflags=all=-N -l'"


# ── run_bash_with_opts ──


@dataclass
class _Module:
    path: str
    version: str


@requires_bash
class TestRunBash:
    def test_stdout_not_returned_unless_requested(self):
        out = run_bash_with_opts(["echo hello"])
        assert out.stdout == ""
        assert out.stderr == ""

    def test_streams_captured_independently(self):
        out = run_bash_with_opts(
            ["echo out", "echo err >&2"],
            RunBashOptions(need_stdout=True, need_stderr=True),
        )
        assert out.stdout == "out\n"
        assert out.stderr == "err\n"

    def test_failure_carries_full_context(self):
        with pytest.raises(CommandError) as exc_info:
            run_bash(["set -e", "echo before", "echo oops >&2", "exit 3", "echo after"])
        err = exc_info.value
        assert err.returncode == 3
        assert err.stdout == "before\n"
        assert err.stderr == "oops\n"
        assert "exit 3" in err.script
        message = str(err)
        assert err.script in message
        assert "before" in message
        assert "oops" in message
        assert "exit status 3" in message

    def test_set_e_stops_at_first_failure(self):
        with pytest.raises(CommandError) as exc_info:
            run_bash_with_opts(["set -e", "false", "echo unreachable"])
        assert "unreachable" not in exc_info.value.stdout

    def test_spawn_failure(self):
        with pytest.raises(CommandError) as exc_info:
            run_bash_with_opts(["echo hi"], shell="/nonexistent/shell")
        assert exc_info.value.returncode is None

    def test_decode_dict(self):
        out = run_bash_with_opts(
            ["""echo '{"Path": "example.com/m", "Dir": "/src/m"}'"""],
            RunBashOptions(stdout_as=dict),
        )
        assert out.data == {"Path": "example.com/m", "Dir": "/src/m"}

    def test_decode_dataclass(self):
        out = run_bash_with_opts(
            ["""echo '{"path": "example.com/m", "version": "v1.2.0"}'"""],
            RunBashOptions(stdout_as=_Module),
        )
        assert out.data == _Module(path="example.com/m", version="v1.2.0")

    def test_decode_failure_is_distinct(self):
        with pytest.raises(DecodeError) as exc_info:
            run_bash_with_opts(["echo not-json"], RunBashOptions(stdout_as=_Module))
        err = exc_info.value
        assert isinstance(err, CommandError)
        assert err.target == "_Module"
        assert "_Module" in str(err)
        assert err.stdout == "not-json\n"

    def test_undecodable_target_type(self):
        class Plain:
            pass

        with pytest.raises(DecodeError) as exc_info:
            run_bash_with_opts(["echo '{}'"], RunBashOptions(stdout_as=Plain))
        assert exc_info.value.target == "Plain"
        assert "Plain" in str(exc_info.value)
