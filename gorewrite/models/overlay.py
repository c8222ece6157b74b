"""Data models for directory overlays."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass
class CopyOptions:
    verbose: bool = False
    ignore_names: list[str] = field(default_factory=list)  # matched against first-level entries
    # maps a destination dir to its final location; "" skips the dir
    process_dest: Callable[[str], str] | None = None
