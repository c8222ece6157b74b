"""Trim-path rule computation.

The compiler records the rewritten tree's paths in debug info. Trim rules
map them back to the original locations so debuggers and stack traces
show the original sources. The compiler honors only the last
``-gcflags`` occurrence, so all rules are merged into one
``-trimpath=`` value separated by ``;``.
"""

from __future__ import annotations

from typing import Iterable, Mapping

import structlog

from gorewrite.exceptions import TrimPathError
from gorewrite.models.build import TrimRule
from gorewrite.shell import quotes
from gorewrite.workspace import Workspace

log = structlog.get_logger(__name__)

RULE_SEPARATOR = ";"
DEBUG_GCFLAGS = ("-N", "-l")  # disable optimizations and inlining


def format_trim_rule(source: str, target: str) -> TrimRule:
    if target == "":
        # debuggers cannot resolve a path rewritten to nothing
        raise TrimPathError(source)
    if target == "/":
        # a rule like <root>=>/ yields paths such as //home/...; the target
        # should keep at least one path segment
        log.warning("trimpath.root_target", source=source, target=target)
    return TrimRule(source=source, target=target)


def build_trim_rules(
    project_root: str,
    workspace: Workspace,
    mapped_mod: Mapping[str, str] | None = None,
) -> list[TrimRule]:
    """Compute the ordered trim rules for one build.

    The project rule always comes first. Module rules follow, sorted by
    original directory so identical builds produce identical flags.
    """
    rules = [format_trim_rule(workspace.work_root(project_root), project_root)]
    for orig_dir, cleaned_dir in sorted((mapped_mod or {}).items()):
        rules.append(format_trim_rule(workspace.resolve(cleaned_dir), orig_dir))
    return rules


def trim_path_flag(rules: Iterable[TrimRule]) -> str:
    return "-trimpath=" + RULE_SEPARATOR.join(r.format() for r in rules)


def gcflags_value(
    rules: Iterable[TrimRule],
    debug: bool = False,
    extra: Iterable[str] = (),
) -> str:
    """Value for ``-gcflags=``, applied to all packages."""
    flags: list[str] = []
    if debug:
        flags.extend(DEBUG_GCFLAGS)
    flags.extend(extra)
    flags.append(trim_path_flag(rules))
    return "all=" + quotes(*flags)
