"""Rewrite root as an explicit value.

Rewritten trees mirror the original absolute path of each directory
underneath the rewrite root: ``/proj`` is rewritten into
``<root>/proj``. The rewrite collaborator follows the same convention.
"""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass

from gorewrite.core.config import get_settings
from gorewrite.exceptions import PathResolutionError


def resolve_abs_path(path: str) -> str:
    """Make *path* absolute and normalized; an empty path resolves to the cwd."""
    if os.path.isabs(path):
        return os.path.normpath(path)
    try:
        cwd = os.getcwd()
    except OSError as e:
        raise PathResolutionError(path, f"get cwd error: {e}") from e
    return os.path.normpath(os.path.join(cwd, path))


def is_within(root: str, path: str) -> bool:
    """Whether normalized *path* is *root* or lies below it."""
    root = posixpath.normpath(root)
    path = posixpath.normpath(path)
    return path == root or path.startswith(root.rstrip("/") + "/")


def join_under(root: str, path: str) -> str:
    """Join *path* under *root*, even when *path* is absolute.

    ``os.path.join`` would drop *root* for an absolute *path*; mirroring
    needs plain concatenation.
    """
    if not path:
        return posixpath.normpath(root)
    return posixpath.normpath(root + "/" + path)


@dataclass(frozen=True)
class Workspace:
    rewrite_root: str

    @classmethod
    def default(cls) -> Workspace:
        """The process-wide root, ``<tmp>/go-rewrite`` unless overridden."""
        return cls(rewrite_root=get_settings().rewrite_root)

    def work_root(self, project_root: str) -> str:
        """Where the rewritten copy of *project_root* lives."""
        return join_under(self.rewrite_root, project_root)

    def resolve(self, cleaned_dir: str) -> str:
        """Absolute location of a directory reported by the rewriter."""
        return join_under(self.rewrite_root, cleaned_dir)
