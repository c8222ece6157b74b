"""Shared pytest fixtures for go-rewrite-build tests."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from gorewrite.core.config import Settings, reset_settings
from gorewrite.workspace import Workspace

# Stand-in for the go toolchain: records cwd and argv (one per line),
# creates the -o target, and fails on demand.
_FAKE_GO = """#!/bin/sh
log="$(dirname "$0")/go-args.txt"
pwd > "$log"
for a in "$@"; do printf '%s\\n' "$a" >> "$log"; done
if [ -n "$FAKE_GO_FAIL" ]; then
  echo "fake stdout: compiling"
  echo "fake stderr: undefined: foo" >&2
  exit 2
fi
prev=""
for a in "$@"; do
  if [ "$prev" = "-o" ]; then : > "$a"; fi
  prev="$a"
done
"""


class FakeGo:
    def __init__(self, path: Path):
        self.path = path
        self.log = path.parent / "go-args.txt"

    def recorded(self) -> tuple[str, list[str]]:
        """Return (cwd, argv) of the last invocation."""
        lines = self.log.read_text().splitlines()
        return lines[0], lines[1:]


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for var in ("GOREWRITE_ROOT", "GOREWRITE_GO", "GOREWRITE_SHELL"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fake_go(tmp_path: Path) -> FakeGo:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    path = bin_dir / "go"
    path.write_text(_FAKE_GO)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return FakeGo(path)


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    root = tmp_path / "rewrite"
    root.mkdir()
    return Workspace(str(root))


@pytest.fixture
def settings(workspace: Workspace, fake_go: FakeGo) -> Settings:
    return Settings(rewrite_root=workspace.rewrite_root, go_binary=str(fake_go.path))


@pytest.fixture
def project(tmp_path: Path, workspace: Workspace) -> Path:
    """A project root whose rewritten copy already exists."""
    root = tmp_path / "proj"
    root.mkdir()
    Path(workspace.work_root(str(root))).mkdir(parents=True)
    return root
