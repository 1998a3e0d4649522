from __future__ import annotations

"""
Layered Ignore-Rule Evaluation.

Loads gitignore-style rule sources and answers "is this entry ignored?" for
root-relative paths. Sources are stacked by priority: the global git
excludes file, then the repository's info/exclude, then each directory's
.gitignore and .ignore from the root downwards. The nearest source with a
matching pattern decides. A scan root outside any git repository simply has
fewer sources.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pathspec import PathSpec

from codebase_md.domain.constants import IGNORE_FILE_NAMES, REPO_EXCLUDE_FILE, VCS_DIR_NAME

logger = logging.getLogger(__name__)

_EXCLUDES_FILE_RX = re.compile(r"^\s*excludesfile\s*=\s*(.+?)\s*$", re.IGNORECASE)
_SECTION_RX = re.compile(r"^\s*\[\s*([^\]\s\"]+)")

# -----------------------------------------------------------------------------
# RULE SOURCES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class IgnoreSource:
    """
    One parsed ignore file anchored at a root-relative directory.

    Attributes:
        base: Directory the patterns are relative to ("" for the root).
        spec: Compiled gitwildmatch patterns.
        origin: Path of the file the patterns came from.
    """
    base: str
    spec: PathSpec
    origin: str

    def decide(self, rel_path: str, is_dir: bool) -> Optional[bool]:
        """
        Evaluate the patterns against a path.

        Returns:
            Optional[bool]: True if ignored, False if re-included by a
                            negation, None if no pattern matched.
        """
        if self.base:
            prefix = self.base + "/"
            if not rel_path.startswith(prefix):
                return None
            local = rel_path[len(prefix):]
        else:
            local = rel_path

        # Trailing slash lets directory-only patterns ("build/") match
        candidate = local + "/" if is_dir else local

        verdict: Optional[bool] = None
        for pattern in self.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(candidate) is not None:
                verdict = pattern.include
        return verdict


def load_ignore_file(file_path: str, base: str) -> Optional[IgnoreSource]:
    """
    Parse one ignore file into an IgnoreSource.

    Missing files are silently absent; unreadable ones are reported and
    treated as empty.

    Args:
        file_path: Absolute path of the ignore file.
        base: Root-relative directory the patterns apply to.

    Returns:
        Optional[IgnoreSource]: The parsed source, or None.
    """
    if not os.path.isfile(file_path):
        return None
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            spec = PathSpec.from_lines("gitwildmatch", f)
    except OSError as e:
        logger.warning(f"Could not read ignore file {file_path}: {e}")
        return None

    # Comments and blank lines may survive parsing as patterns without a verdict
    active = sum(1 for p in spec.patterns if p.include is not None)
    if not active:
        return None
    logger.debug(f"Loaded {active} ignore patterns from {file_path}")
    return IgnoreSource(base=base, spec=spec, origin=file_path)

# -----------------------------------------------------------------------------
# LAYERED EVALUATOR
# -----------------------------------------------------------------------------

class IgnoreRules:
    """
    Immutable stack of ignore sources, lowest priority first.

    Entering a directory yields a new stack with that directory's own ignore
    files pushed on top; siblings never see each other's rules.
    """

    def __init__(self, sources: Sequence[IgnoreSource] = ()) -> None:
        self._sources: Tuple[IgnoreSource, ...] = tuple(sources)

    @property
    def sources(self) -> Tuple[IgnoreSource, ...]:
        return self._sources

    @classmethod
    def load_root(cls, root_path: str, use_global: bool = True) -> "IgnoreRules":
        """
        Build the stack for the scan root.

        Args:
            root_path: Absolute scan root.
            use_global: Include the user's global git excludes file.

        Returns:
            IgnoreRules: Global, repository-exclude and root-level sources.
        """
        sources: List[IgnoreSource] = []

        if use_global:
            global_file = find_global_excludes_file()
            if global_file:
                src = load_ignore_file(global_file, "")
                if src:
                    sources.append(src)

        exclude_file = find_repo_exclude_file(root_path)
        if exclude_file:
            src = load_ignore_file(exclude_file, "")
            if src:
                sources.append(src)

        return cls(sources).for_directory(root_path, "")

    def for_directory(self, root_path: str, rel_dir: str) -> "IgnoreRules":
        """
        Return the stack that applies to the children of 'rel_dir'.

        Args:
            root_path: Absolute scan root.
            rel_dir: Root-relative directory ("" for the root).

        Returns:
            IgnoreRules: self if the directory has no ignore files.
        """
        abs_dir = os.path.join(root_path, rel_dir) if rel_dir else root_path
        added: List[IgnoreSource] = []
        for name in IGNORE_FILE_NAMES:
            src = load_ignore_file(os.path.join(abs_dir, name), rel_dir)
            if src:
                added.append(src)

        if not added:
            return self
        return IgnoreRules(self._sources + tuple(added))

    def is_ignored(self, rel_path: str, is_dir: bool) -> bool:
        """
        Decide whether a root-relative path is excluded.

        Args:
            rel_path: '/'-separated path relative to the scan root.
            is_dir: Whether the entry is a directory.

        Returns:
            bool: True if the highest-priority matching source ignores it.
        """
        for source in reversed(self._sources):
            verdict = source.decide(rel_path, is_dir)
            if verdict is not None:
                return verdict
        return False

# -----------------------------------------------------------------------------
# SOURCE DISCOVERY
# -----------------------------------------------------------------------------

def find_repo_exclude_file(root_path: str) -> Optional[str]:
    """
    Locate '<git dir>/info/exclude' for a root that is a repository.

    Supports both a '.git' directory and a '.git' file pointing elsewhere
    ("gitdir: <path>"), as used by worktrees and submodules.
    """
    dot_git = os.path.join(root_path, VCS_DIR_NAME)
    git_dir: Optional[str] = None

    if os.path.isdir(dot_git):
        git_dir = dot_git
    elif os.path.isfile(dot_git):
        try:
            with open(dot_git, "r", encoding="utf-8", errors="replace") as f:
                first = f.readline().strip()
        except OSError as e:
            logger.debug(f"Could not read {dot_git}: {e}")
            return None
        if first.startswith("gitdir:"):
            git_dir = first[len("gitdir:"):].strip()
            if not os.path.isabs(git_dir):
                git_dir = os.path.join(root_path, git_dir)

    if not git_dir:
        return None
    path = os.path.join(git_dir, *REPO_EXCLUDE_FILE)
    return path if os.path.isfile(path) else None


def find_global_excludes_file() -> Optional[str]:
    """
    Resolve the user's global git excludes file.

    Uses 'core.excludesFile' from the user git config when set, otherwise
    git's default '$XDG_CONFIG_HOME/git/ignore'. Both user config files
    are read in git's order, XDG first and ~/.gitconfig last, so the
    latter wins when both set the key.
    """
    xdg_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")

    configured: Optional[str] = None
    for config_path in (os.path.join(xdg_home, "git", "config"), os.path.expanduser("~/.gitconfig")):
        value = _read_excludes_setting(config_path)
        if value:
            configured = value
    if configured:
        return os.path.expanduser(configured)

    default = os.path.join(xdg_home, "git", "ignore")
    return default if os.path.isfile(default) else None


def _read_excludes_setting(config_path: str) -> Optional[str]:
    """Extract core.excludesFile from a git config file, if present."""
    if not os.path.isfile(config_path):
        return None

    found: Optional[str] = None
    section = ""
    try:
        with open(config_path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                stripped = line.strip()
                if not stripped or stripped[0] in "#;":
                    continue
                header = _SECTION_RX.match(stripped)
                if header:
                    section = header.group(1).lower()
                    continue
                if section != "core":
                    continue
                m = _EXCLUDES_FILE_RX.match(stripped)
                if m:
                    # Later assignments override earlier ones, as in git
                    found = m.group(1).strip('"')
    except OSError as e:
        logger.debug(f"Could not read git config {config_path}: {e}")
        return None
    return found
