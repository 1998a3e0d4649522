from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures that lay out small project trees on disk.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def write_tree(root: Path, files: Dict[str, bytes]) -> Path:
    """Create every file of 'files' (relative path -> bytes) under 'root'."""
    for rel, data in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    return root


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Point HOME and XDG_CONFIG_HOME at an empty directory.

    Keeps the developer's global git excludes file out of every test.
    """
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create the reference project.

    Structure:
    /project
      .gitignore      (ignores sub/b.bin)
      a.txt           "hello"
      /sub
        b.bin         binary
        c.txt         "world"
    """
    root = tmp_path / "project"
    root.mkdir()
    return write_tree(root, {
        ".gitignore": b"sub/b.bin\n",
        "a.txt": b"hello",
        "sub/b.bin": b"\x00\x01\x02\x03\xff",
        "sub/c.txt": b"world",
    })


@pytest.fixture
def make_files() -> Callable[[Path, Dict[str, bytes]], Path]:
    """Expose write_tree to tests that lay out their own files."""
    return write_tree
