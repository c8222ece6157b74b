"""Quoting and shell execution primitive.

Every external step (compiler invocation, overlay copy) is expressed as a
list of shell statements, assembled into one script and run by a single
``bash -c`` child process. ``quote`` is the only escaping function; every
user-controlled path or argument passes through it before it reaches a
script.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import structlog
from pydantic import PydanticUserError, TypeAdapter, ValidationError

from gorewrite.core.config import get_settings
from gorewrite.exceptions import CommandError, DecodeError

log = structlog.get_logger(__name__)

# whitespace, operators and expansions, plus quotes, pipes and glob characters
_SPECIAL_CHARS = frozenset("\t \n;<>\\${}()&!'\"`|*?[#~")

# statements ending in one of these are already joined to the next one
_CONTINUATIONS = ("\n", "&&", "||", ";")


def quote(s: str) -> str:
    """Quote *s* for a POSIX shell.

    Strings without special characters are returned unchanged, so quoting
    plain paths keeps scripts readable in logs.
    """
    if s == "":
        return "''"
    if any(c in _SPECIAL_CHARS for c in s):
        return "'" + s.replace("'", "'\\''") + "'"
    return s


def quotes(*args: str) -> str:
    return " ".join(quote(a) for a in args)


def join_args(args: Iterable[str]) -> str:
    return " ".join(quote(a) for a in args)


def bash_command_expr(statements: Sequence[str]) -> str:
    """Assemble statements into one script.

    Statements are stripped and blank ones dropped. A newline separates
    consecutive statements unless the earlier one already ends with a
    line terminator or a control operator.
    """
    cleaned = [s.strip() for s in statements]
    cleaned = [s for s in cleaned if s]
    parts: list[str] = []
    for i, stmt in enumerate(cleaned):
        parts.append(stmt)
        if i == len(cleaned) - 1:
            break
        if stmt.endswith(_CONTINUATIONS):
            continue
        parts.append("\n")
    return "".join(parts)


@dataclass
class CommandLine:
    """Argument vector rendered into a shell statement in one step.

    Argument boundaries are tracked as list elements; quoting happens only
    in ``render``.
    """

    argv: list[str] = field(default_factory=list)

    def add(self, *args: str) -> CommandLine:
        self.argv.extend(args)
        return self

    def add_flag(self, name: str, value: str) -> CommandLine:
        """Append ``name=value`` as a single argument."""
        self.argv.append(f"{name}={value}")
        return self

    def render(self) -> str:
        return join_args(self.argv)


@dataclass
class RunBashOptions:
    verbose: bool = False
    need_stdout: bool = False
    need_stderr: bool = False
    # if set, stdout is decoded as JSON into this type
    stdout_as: Any = None


@dataclass
class BashOutput:
    stdout: str = ""
    stderr: str = ""
    data: Any = None


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


def run_bash_with_opts(
    statements: Sequence[str],
    opts: RunBashOptions | None = None,
    shell: str | None = None,
) -> BashOutput:
    """Run *statements* as one script in a child shell.

    Blocks until the shell exits; no timeout is applied.

    Raises:
        CommandError: the shell could not be spawned or exited non-zero.
        DecodeError: ``stdout_as`` was requested and stdout did not decode,
            or pydantic cannot build a schema for ``stdout_as``.
    """
    if opts is None:
        opts = RunBashOptions()
    if shell is None:
        shell = get_settings().shell

    script = bash_command_expr(statements)
    if opts.verbose:
        log.info("shell.run", script=script)
    else:
        log.debug("shell.run", script=script)

    try:
        proc = subprocess.run([shell, "-c", script], capture_output=True)
    except OSError as e:
        raise CommandError(script, None, reason=str(e)) from e

    stdout = proc.stdout.decode(errors="replace")
    stderr = proc.stderr.decode(errors="replace")
    if proc.returncode != 0:
        raise CommandError(script, proc.returncode, stdout, stderr)

    result = BashOutput()
    if opts.need_stdout:
        result.stdout = stdout
    if opts.need_stderr:
        result.stderr = stderr
    if opts.stdout_as is not None:
        try:
            result.data = TypeAdapter(opts.stdout_as).validate_json(proc.stdout)
        except (ValidationError, PydanticUserError) as e:
            raise DecodeError(script, stdout, stderr, _type_name(opts.stdout_as), str(e)) from e
    return result


def run_bash(statements: Sequence[str], verbose: bool = False) -> None:
    run_bash_with_opts(statements, RunBashOptions(verbose=verbose))
