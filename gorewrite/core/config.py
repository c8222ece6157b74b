"""Environment-driven settings."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass

ENV_REWRITE_ROOT = "GOREWRITE_ROOT"
ENV_GO_BINARY = "GOREWRITE_GO"
ENV_SHELL = "GOREWRITE_SHELL"

REWRITE_DIR_NAME = "go-rewrite"


def default_rewrite_root() -> str:
    """Well-known rewrite root: a pure function of the OS temp dir."""
    return os.path.join(tempfile.gettempdir(), REWRITE_DIR_NAME)


@dataclass(frozen=True)
class Settings:
    rewrite_root: str
    go_binary: str = "go"
    shell: str = "bash"

    @classmethod
    def from_env(cls) -> Settings:
        """Read settings from the environment.

        Reads:
            GOREWRITE_ROOT  — rewrite root (default: <tmp>/go-rewrite)
            GOREWRITE_GO    — compiler driver (default: go)
            GOREWRITE_SHELL — shell used to run scripts (default: bash)
        """
        return cls(
            rewrite_root=os.environ.get(ENV_REWRITE_ROOT) or default_rewrite_root(),
            go_binary=os.environ.get(ENV_GO_BINARY) or "go",
            shell=os.environ.get(ENV_SHELL) or "bash",
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
