"""CLI entry point: go-rewrite-build.

Subcommands:
    go-rewrite-build build [--debug] [--map ORIG=CLEANED] -- ./cmd/app
    go-rewrite-build copy-dirs SRC... --dest DIR [--ignore NAME]
    go-rewrite-build trimpath --project-root DIR [--map ORIG=CLEANED]
    go-rewrite-build rewrite-root
"""

from __future__ import annotations

import click

from gorewrite.build.invoker import build as run_build
from gorewrite.build.trimpath import build_trim_rules, trim_path_flag
from gorewrite.core.logging import setup_logging
from gorewrite.exceptions import RewriteBuildError
from gorewrite.models.build import BuildOptions
from gorewrite.models.overlay import CopyOptions
from gorewrite.overlay import clean_go_fs_path, copy_dirs
from gorewrite.workspace import Workspace, resolve_abs_path


def _parse_mappings(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``ORIG=CLEANED`` options."""
    mapped: dict[str, str] = {}
    for value in values:
        orig, sep, cleaned = value.partition("=")
        if not sep or not orig or not cleaned:
            raise click.BadParameter(f"expected ORIG=CLEANED, got {value!r}", param_hint="--map")
        mapped[orig] = cleaned
    return mapped


def _workspace(rewrite_root: str | None) -> Workspace:
    if rewrite_root:
        return Workspace(rewrite_root)
    return Workspace.default()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Build Go programs from a rewritten source tree, keeping original paths in debug info."""
    setup_logging(level="DEBUG" if verbose else None)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command(context_settings={"ignore_unknown_options": True})
@click.option("--project-root", default="", help="Project root (default: cwd)")
@click.option("-o", "--output", default="", help="Output binary (default: exec.bin / debug.bin)")
@click.option("--debug", is_flag=True, help="Disable optimizations and inlining")
@click.option("--map", "mappings", multiple=True, metavar="ORIG=CLEANED", help="Relocated module dir")
@click.option("--gcflag", "gcflags", multiple=True, help="Extra compiler flag")
@click.option("--rewrite-root", default=None, help="Rewrite root (default: <tmp>/go-rewrite)")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def build(
    ctx: click.Context,
    project_root: str,
    output: str,
    debug: bool,
    mappings: tuple[str, ...],
    gcflags: tuple[str, ...],
    rewrite_root: str | None,
    args: tuple[str, ...],
) -> None:
    """Compile the rewritten copy of a project."""
    opts = BuildOptions(
        verbose=ctx.obj["verbose"],
        project_root=project_root,
        debug=debug,
        output=output,
        mapped_mod=_parse_mappings(mappings),
        extra_gcflags=list(gcflags),
    )
    try:
        result = run_build(list(args), opts, workspace=_workspace(rewrite_root))
    except RewriteBuildError as e:
        raise click.ClickException(str(e)) from e
    click.echo(result.output)


@main.command("copy-dirs")
@click.argument("src_dirs", nargs=-1)
@click.option("--dest", "dest_root", required=True, help="Overlay root (recreated)")
@click.option("--ignore", "ignore_names", multiple=True, help="First-level name to skip")
@click.option("--clean-go-paths", is_flag=True, help="Replace '@' in destination paths")
@click.pass_context
def copy_dirs_cmd(
    ctx: click.Context,
    src_dirs: tuple[str, ...],
    dest_root: str,
    ignore_names: tuple[str, ...],
    clean_go_paths: bool,
) -> None:
    """Mirror source directories under an overlay root."""
    opts = CopyOptions(
        verbose=ctx.obj["verbose"],
        ignore_names=list(ignore_names),
        process_dest=clean_go_fs_path if clean_go_paths else None,
    )
    try:
        copy_dirs(list(src_dirs), dest_root, opts)
    except RewriteBuildError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.option("--project-root", default="", help="Project root (default: cwd)")
@click.option("--map", "mappings", multiple=True, metavar="ORIG=CLEANED", help="Relocated module dir")
@click.option("--rewrite-root", default=None, help="Rewrite root (default: <tmp>/go-rewrite)")
def trimpath(project_root: str, mappings: tuple[str, ...], rewrite_root: str | None) -> None:
    """Print the -trimpath flag a build would use."""
    workspace = _workspace(rewrite_root)
    try:
        root = resolve_abs_path(project_root)
        ws = Workspace(resolve_abs_path(workspace.rewrite_root))
        rules = build_trim_rules(root, ws, _parse_mappings(mappings))
    except RewriteBuildError as e:
        raise click.ClickException(str(e)) from e
    click.echo(trim_path_flag(rules))


@main.command("rewrite-root")
def rewrite_root_cmd() -> None:
    """Print the effective rewrite root."""
    click.echo(Workspace.default().rewrite_root)


if __name__ == "__main__":
    main()
