"""Contract of the source rewrite step.

The rewriter instruments a project into a copy under the rewrite root,
mirroring original absolute paths, and reports which module directories
it relocated. Relocated modules appear in ``RewriteResult.mapped_mod``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from gorewrite.models.build import RewriteResult


@dataclass
class RewriteOptions:
    verbose: bool = False
    project_dir: str = ""


class Rewriter(Protocol):
    def gen_rewrite(
        self,
        args: Sequence[str],
        rewrite_root: str,
        opts: RewriteOptions,
    ) -> RewriteResult: ...
