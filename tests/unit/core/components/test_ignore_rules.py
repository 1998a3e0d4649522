from __future__ import annotations

"""
Unit tests for the layered ignore-rule evaluator.

Verifies:
1. Pattern semantics of a single source (anchoring, directory-only, negation).
2. Precedence between stacked sources (nearest directory wins).
3. Discovery of the repository exclude file and the global excludes file.
"""

import os
from pathlib import Path

from pathspec import PathSpec

from codebase_md.core.pipeline.components.ignore_rules import (
    IgnoreRules,
    IgnoreSource,
    find_global_excludes_file,
    find_repo_exclude_file,
    load_ignore_file,
)


def _source(lines, base: str = "") -> IgnoreSource:
    return IgnoreSource(base=base, spec=PathSpec.from_lines("gitwildmatch", lines), origin="<test>")

# -----------------------------------------------------------------------------
# SINGLE SOURCE SEMANTICS
# -----------------------------------------------------------------------------

def test_decide_basic_and_negated_patterns():
    """TC-01: Verify last matching pattern wins and unmatched paths yield None."""
    src = _source(["*.log", "!keep.log"])

    assert src.decide("debug.log", is_dir=False) is True
    assert src.decide("nested/trace.log", is_dir=False) is True
    assert src.decide("keep.log", is_dir=False) is False
    assert src.decide("main.py", is_dir=False) is None


def test_decide_directory_only_pattern():
    """TC-02: Verify 'build/' matches the directory but not a file named build."""
    src = _source(["build/"])

    assert src.decide("build", is_dir=True) is True
    assert src.decide("build", is_dir=False) is None


def test_decide_respects_source_base():
    """TC-03: Verify patterns of a nested file only apply below their directory."""
    src = _source(["/local.txt", "*.tmp"], base="sub")

    assert src.decide("sub/local.txt", is_dir=False) is True
    assert src.decide("sub/deeper/local.txt", is_dir=False) is None
    assert src.decide("sub/deeper/x.tmp", is_dir=False) is True
    assert src.decide("other/x.tmp", is_dir=False) is None
    assert src.decide("x.tmp", is_dir=False) is None


def test_load_ignore_file_missing_and_empty(tmp_path: Path):
    """TC-04: Verify missing or comment-only files produce no source."""
    assert load_ignore_file(str(tmp_path / ".gitignore"), "") is None

    comments = tmp_path / ".ignore"
    comments.write_text("# nothing here\n\n", encoding="utf-8")
    assert load_ignore_file(str(comments), "") is None

    real = tmp_path / ".gitignore"
    real.write_text("*.pyc\n", encoding="utf-8")
    src = load_ignore_file(str(real), "")
    assert src is not None
    assert src.origin == str(real)

# -----------------------------------------------------------------------------
# STACKED PRECEDENCE
# -----------------------------------------------------------------------------

def test_nested_negation_overrides_parent(tmp_path: Path):
    """TC-05: Verify a subdirectory's .gitignore can re-include what the root ignores."""
    (tmp_path / ".gitignore").write_text("*.txt\n", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / ".gitignore").write_text("!keep.txt\n", encoding="utf-8")

    root_rules = IgnoreRules.load_root(str(tmp_path))
    sub_rules = root_rules.for_directory(str(tmp_path), "sub")

    assert root_rules.is_ignored("a.txt", is_dir=False) is True
    assert sub_rules.is_ignored("sub/keep.txt", is_dir=False) is False
    assert sub_rules.is_ignored("sub/other.txt", is_dir=False) is True


def test_dot_ignore_beats_gitignore_in_same_directory(tmp_path: Path):
    """TC-06: Verify .ignore has priority over .gitignore of the same directory."""
    (tmp_path / ".gitignore").write_text("*.md\n", encoding="utf-8")
    (tmp_path / ".ignore").write_text("!README.md\n", encoding="utf-8")

    rules = IgnoreRules.load_root(str(tmp_path))

    assert rules.is_ignored("README.md", is_dir=False) is False
    assert rules.is_ignored("NOTES.md", is_dir=False) is True


def test_for_directory_without_files_returns_same_stack(tmp_path: Path):
    """TC-07: Verify entering a directory with no ignore files reuses the stack."""
    (tmp_path / "plain").mkdir()
    rules = IgnoreRules.load_root(str(tmp_path))

    assert rules.for_directory(str(tmp_path), "plain") is rules
    assert rules.is_ignored("anything", is_dir=False) is False


def test_sibling_rules_do_not_leak(tmp_path: Path):
    """TC-08: Verify one directory's rules never apply to its sibling."""
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    (tmp_path / "a" / ".gitignore").write_text("*.dat\n", encoding="utf-8")

    root_rules = IgnoreRules.load_root(str(tmp_path))
    a_rules = root_rules.for_directory(str(tmp_path), "a")
    b_rules = root_rules.for_directory(str(tmp_path), "b")

    assert a_rules.is_ignored("a/x.dat", is_dir=False) is True
    assert b_rules.is_ignored("b/x.dat", is_dir=False) is False

# -----------------------------------------------------------------------------
# SOURCE DISCOVERY
# -----------------------------------------------------------------------------

def test_repo_exclude_file_from_git_directory(tmp_path: Path):
    """TC-09: Verify info/exclude is found inside a '.git' directory."""
    info = tmp_path / ".git" / "info"
    info.mkdir(parents=True)
    (info / "exclude").write_text("secret.txt\n", encoding="utf-8")

    assert find_repo_exclude_file(str(tmp_path)) == os.path.join(str(tmp_path), ".git", "info", "exclude")
    assert IgnoreRules.load_root(str(tmp_path)).is_ignored("secret.txt", is_dir=False) is True


def test_repo_exclude_file_from_gitdir_pointer(tmp_path: Path):
    """TC-10: Verify a '.git' file with a relative gitdir pointer is followed."""
    real_git = tmp_path / "actual_git"
    (real_git / "info").mkdir(parents=True)
    (real_git / "info" / "exclude").write_text("*.bak\n", encoding="utf-8")

    worktree = tmp_path / "worktree"
    worktree.mkdir()
    (worktree / ".git").write_text("gitdir: ../actual_git\n", encoding="utf-8")

    found = find_repo_exclude_file(str(worktree))
    assert found is not None
    assert os.path.normpath(found) == os.path.normpath(str(real_git / "info" / "exclude"))


def test_no_repository_means_no_exclude_file(tmp_path: Path):
    """TC-11: Verify a root outside any repository has no exclude source."""
    assert find_repo_exclude_file(str(tmp_path)) is None


def test_global_excludes_default_location():
    """TC-12: Verify $XDG_CONFIG_HOME/git/ignore is used when nothing is configured."""
    xdg = Path(os.environ["XDG_CONFIG_HOME"])
    assert find_global_excludes_file() is None

    (xdg / "git").mkdir(parents=True)
    (xdg / "git" / "ignore").write_text("*.swp\n", encoding="utf-8")
    assert find_global_excludes_file() == str(xdg / "git" / "ignore")


def test_global_excludes_from_gitconfig(tmp_path: Path):
    """TC-13: Verify core.excludesFile from ~/.gitconfig takes precedence."""
    custom = tmp_path / "my_excludes"
    custom.write_text("*.orig\n", encoding="utf-8")

    home = Path(os.path.expanduser("~"))
    (home / ".gitconfig").write_text(
        "[user]\n"
        "    excludesfile = /not/this/one\n"
        "[core]\n"
        "    editor = vim\n"
        f"    excludesFile = \"{custom.as_posix()}\"\n",
        encoding="utf-8",
    )

    assert os.path.normpath(find_global_excludes_file()) == os.path.normpath(str(custom))

    root = tmp_path / "project"
    root.mkdir()
    assert IgnoreRules.load_root(str(root)).is_ignored("x.orig", is_dir=False) is True
    assert IgnoreRules.load_root(str(root), use_global=False).is_ignored("x.orig", is_dir=False) is False


def test_global_excludes_home_config_overrides_xdg_config(tmp_path: Path):
    """TC-14: Verify ~/.gitconfig wins over $XDG_CONFIG_HOME/git/config, as git reads it last."""
    xdg_choice = tmp_path / "xdg_ignore"
    home_choice = tmp_path / "home_ignore"

    xdg_git = Path(os.environ["XDG_CONFIG_HOME"]) / "git"
    xdg_git.mkdir(parents=True)
    (xdg_git / "config").write_text(
        f"[core]\n    excludesFile = {xdg_choice.as_posix()}\n", encoding="utf-8"
    )
    (Path(os.path.expanduser("~")) / ".gitconfig").write_text(
        f"[core]\n    excludesFile = {home_choice.as_posix()}\n", encoding="utf-8"
    )

    assert os.path.normpath(find_global_excludes_file()) == os.path.normpath(str(home_choice))


def test_global_excludes_from_xdg_config_only():
    """TC-15: Verify the XDG git config is used when ~/.gitconfig does not set the key."""
    xdg_git = Path(os.environ["XDG_CONFIG_HOME"]) / "git"
    xdg_git.mkdir(parents=True)
    (xdg_git / "config").write_text("[core]\n    excludesFile = /srv/xdg_ignore\n", encoding="utf-8")
    (Path(os.path.expanduser("~")) / ".gitconfig").write_text("[user]\n    name = dev\n", encoding="utf-8")

    assert find_global_excludes_file() == "/srv/xdg_ignore"
