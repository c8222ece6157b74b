"""go-rewrite-build: compile rewritten Go trees with original paths in debug info."""

__version__ = "0.1.0"

from gorewrite.build.invoker import build, build_rewrite
from gorewrite.build.rewrite import RewriteOptions, Rewriter
from gorewrite.build.trimpath import build_trim_rules, trim_path_flag
from gorewrite.exceptions import (
    BuildError,
    CommandError,
    ConfigError,
    DecodeError,
    DirectoryListError,
    PathResolutionError,
    RewriteBuildError,
    TrimPathError,
)
from gorewrite.models.build import BuildOptions, BuildResult, RewriteResult, TrimRule
from gorewrite.models.overlay import CopyOptions
from gorewrite.overlay import clean_go_fs_path, copy_dirs
from gorewrite.shell import RunBashOptions, quote, run_bash, run_bash_with_opts
from gorewrite.workspace import Workspace

__all__ = [
    "BuildError",
    "BuildOptions",
    "BuildResult",
    "CommandError",
    "ConfigError",
    "CopyOptions",
    "DecodeError",
    "DirectoryListError",
    "PathResolutionError",
    "RewriteBuildError",
    "RewriteOptions",
    "RewriteResult",
    "Rewriter",
    "RunBashOptions",
    "TrimPathError",
    "TrimRule",
    "Workspace",
    "build",
    "build_rewrite",
    "build_trim_rules",
    "clean_go_fs_path",
    "copy_dirs",
    "quote",
    "run_bash",
    "run_bash_with_opts",
    "trim_path_flag",
]
