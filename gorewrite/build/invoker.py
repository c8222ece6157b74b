"""Build invocation — compile the rewritten tree with original paths in debug info.

Script shape::

    set -e
    cd <rewrite root>/<project root>
    go build -o <output> '-gcflags=all=-N -l '\\''-trimpath=...'\\''' <args...>
"""

from __future__ import annotations

import os
from typing import Sequence

import structlog

from gorewrite.build.rewrite import RewriteOptions, Rewriter
from gorewrite.build.trimpath import build_trim_rules, gcflags_value
from gorewrite.core.config import Settings, get_settings
from gorewrite.exceptions import BuildError, CommandError
from gorewrite.models.build import BuildOptions, BuildResult
from gorewrite.shell import CommandLine, RunBashOptions, bash_command_expr, quote, run_bash_with_opts
from gorewrite.workspace import Workspace, resolve_abs_path

log = structlog.get_logger(__name__)

DEFAULT_OUTPUT = "exec.bin"
DEFAULT_DEBUG_OUTPUT = "debug.bin"


def resolve_output(output: str, project_root: str, debug: bool) -> str:
    if output:
        return resolve_abs_path(output)
    name = DEFAULT_DEBUG_OUTPUT if debug else DEFAULT_OUTPUT
    return os.path.join(project_root, name)


def build(
    args: Sequence[str],
    opts: BuildOptions | None = None,
    workspace: Workspace | None = None,
    settings: Settings | None = None,
) -> BuildResult:
    """Compile the rewritten copy of ``opts.project_root``.

    Args:
        args: Extra arguments for ``go build``, passed through as-is.
        opts: Build options; ``mapped_mod`` adds one trim rule per entry.
        workspace: Rewrite root to build from (default: process-wide root).
        settings: Compiler and shell binaries (default: from environment).

    Returns:
        BuildResult with the absolute output path.

    Raises:
        PathResolutionError: project root or output could not be resolved.
        BuildError: the compiler invocation failed; carries script and streams.
    """
    if opts is None:
        opts = BuildOptions()
    if settings is None:
        settings = get_settings()
    if workspace is None:
        workspace = Workspace(settings.rewrite_root)

    project_root = resolve_abs_path(opts.project_root)
    output = resolve_output(opts.output, project_root, opts.debug)
    workspace = Workspace(resolve_abs_path(workspace.rewrite_root))

    trim_rules = build_trim_rules(project_root, workspace, opts.mapped_mod)
    work_root = trim_rules[0].source

    cmd = (
        CommandLine([settings.go_binary, "build"])
        .add("-o", output)
        .add_flag("-gcflags", gcflags_value(trim_rules, opts.debug, opts.extra_gcflags))
        .add(*args)
    )
    statements = [
        "set -e",
        f"cd {quote(work_root)}",
        cmd.render(),
    ]
    script = bash_command_expr(statements)

    try:
        run_bash_with_opts(statements, RunBashOptions(verbose=opts.verbose), shell=settings.shell)
    except CommandError as e:
        log.error("build.failed", output=output, reason=e.reason)
        raise BuildError(output, e) from e

    if opts.verbose:
        log.info("build.done", output=output)
    else:
        log.debug("build.done", output=output)
    return BuildResult(output=output, script=script, trim_rules=trim_rules)


def build_rewrite(
    args: Sequence[str],
    rewriter: Rewriter,
    opts: BuildOptions | None = None,
    rewrite_opts: RewriteOptions | None = None,
    workspace: Workspace | None = None,
    settings: Settings | None = None,
) -> BuildResult:
    """Rewrite the project under the workspace root, then build it."""
    if opts is None:
        opts = BuildOptions()
    if rewrite_opts is None:
        rewrite_opts = RewriteOptions(verbose=opts.verbose)
    if settings is None:
        settings = get_settings()
    if workspace is None:
        workspace = Workspace(settings.rewrite_root)
    rewrite_opts.project_dir = opts.project_root

    res = rewriter.gen_rewrite(args, workspace.rewrite_root, rewrite_opts)
    opts.mapped_mod = dict(res.mapped_mod)
    return build(args, opts, workspace=workspace, settings=settings)
