"""Data models for trim rules and build invocations."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TrimRule:
    """Replace path prefix *source* with *target* in debug info."""

    source: str  # path as seen by the compiler, under the rewrite root
    target: str  # original absolute path, never empty

    def format(self) -> str:
        return f"{self.source}=>{self.target}"


@dataclass
class BuildOptions:
    verbose: bool = False
    project_root: str = ""  # default: cwd
    debug: bool = False
    output: str = ""  # default: exec.bin / debug.bin under project_root
    # original module abs dir -> cleaned dir under the rewrite root
    mapped_mod: dict[str, str] = field(default_factory=dict)
    extra_gcflags: list[str] = field(default_factory=list)


@dataclass
class BuildResult:
    output: str
    script: str = ""
    trim_rules: list[TrimRule] = field(default_factory=list)


@dataclass
class RewriteResult:
    """Output contract of the rewrite collaborator."""

    mapped_mod: dict[str, str] = field(default_factory=dict)
