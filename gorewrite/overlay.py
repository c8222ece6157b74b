"""Directory overlay — filtered, permission-normalized mirrors of source dirs.

Only the first level of each source directory is inspected: ignored names
and non-directory entries over ``MAX_COPY_FILE_SIZE`` are dropped, the
rest is copied recursively by ``cp -R`` in a single shell script.
"""

from __future__ import annotations

import os
from typing import Sequence

import structlog

from gorewrite.exceptions import ConfigError, DirectoryListError
from gorewrite.models.overlay import CopyOptions
from gorewrite.shell import quote, run_bash
from gorewrite.workspace import is_within, join_under, resolve_abs_path

log = structlog.get_logger(__name__)

MAX_COPY_FILE_SIZE = 10 * 1024 * 1024


def clean_go_fs_path(path: str) -> str:
    """Replace ``@`` so module cache paths are usable in go.mod replace directives.

    Example: ``/gopath/pkg/mod/google.golang.org/grpc@v1.47.0/xds`` becomes
    ``/gopath/pkg/mod/google.golang.org/grpc/v1.47.0/xds``.
    """
    return path.replace("@", "/")


def _list_copy_names(src_dir: str, ignore: set[str]) -> list[str]:
    try:
        with os.scandir(src_dir) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise DirectoryListError(src_dir, str(e)) from e

    names = []
    for entry in entries:
        if entry.name in ignore:
            continue
        try:
            if not entry.is_dir(follow_symlinks=False):
                if entry.stat(follow_symlinks=False).st_size > MAX_COPY_FILE_SIZE:
                    continue
        except OSError as e:
            raise DirectoryListError(src_dir, str(e)) from e
        names.append(entry.name)
    return names


def _validate(src_dirs: Sequence[str], dest_root: str) -> None:
    if not src_dirs:
        raise ConfigError("copy_dirs: empty src_dirs")
    for i, src_dir in enumerate(src_dirs):
        if not src_dir:
            raise ConfigError(f"src_dirs contains empty dir: {list(src_dirs)} at {i}")
    if not dest_root:
        raise ConfigError("copy_dirs: no dest_root")
    if dest_root == "/":
        raise ConfigError("dest_root cannot be /")


def copy_dirs(
    src_dirs: Sequence[str],
    dest_root: str,
    opts: CopyOptions | None = None,
) -> None:
    """Recreate *dest_root* as a filtered mirror of *src_dirs*.

    Each source dir lands at ``dest_root`` joined with its own path, e.g.
    ``/a/b`` under ``/tmp/x`` becomes ``/tmp/x/a/b``. *dest_root* is removed
    first; nothing from a previous overlay survives.

    Raises:
        ConfigError: invalid arguments, raised before any filesystem change.
        PathResolutionError: a relative source could not be made absolute.
        DirectoryListError: a source dir could not be listed, raised before
            any filesystem change.
        CommandError: the copy script failed.
    """
    if opts is None:
        opts = CopyOptions()
    _validate(src_dirs, dest_root)

    # relative sources are mirrored by their absolute path so ".." cannot
    # climb out of dest_root
    abs_src_dirs = [resolve_abs_path(src_dir) for src_dir in src_dirs]
    dst_dirs = []
    for abs_src in abs_src_dirs:
        dst_dir = join_under(dest_root, abs_src)
        if not is_within(dest_root, dst_dir):
            raise ConfigError(f"destination {dst_dir} escapes dest_root {dest_root}")
        dst_dirs.append(dst_dir)

    ignore = set(opts.ignore_names)
    files = [_list_copy_names(src_dir, ignore) for src_dir in abs_src_dirs]

    q_dest_root = quote(dest_root)
    statements = [
        "set -e",
        f"rm -rf {q_dest_root} && mkdir -p {q_dest_root}",
    ]
    for src_dir, dst_dir, names in zip(abs_src_dirs, dst_dirs, files):
        if not names:
            continue
        if opts.process_dest is not None:
            dst_dir = opts.process_dest(dst_dir)
            if not dst_dir:
                continue

        q_src = quote(src_dir)
        q_dst = quote(dst_dir)
        statements.append(f"rm -rf {q_dst} && mkdir -p {q_dst}")
        for name in names:
            q_name = quote(name)
            statements.append(f"cp -R {q_src}/{q_name} {q_dst}/{q_name}")
        statements.append(f"chmod -R 0777 {q_dst}")

    if opts.verbose:
        log.info("overlay.copy", src_dirs=list(src_dirs), dest_root=dest_root)
    else:
        log.debug("overlay.copy", src_dirs=list(src_dirs), dest_root=dest_root)
    run_bash(statements, verbose=opts.verbose)
