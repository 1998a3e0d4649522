from __future__ import annotations

"""
Entry Visibility Filter.

Decides, for one filesystem entry met during the walk, whether it is
visible at all: the version-control metadata directory and the artifact
being written are always hidden, everything else defers to the layered
ignore rules.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from codebase_md.core.pipeline.components.ignore_rules import IgnoreRules
from codebase_md.domain.constants import VCS_DIR_NAME
from codebase_md.infra.fs import to_relative

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATH FILTER
# -----------------------------------------------------------------------------

class PathFilter:
    """
    Pure visibility predicate bound to one scan root and one artifact.

    The artifact identity is resolved once at construction; when resolution
    fails (the artifact does not exist yet) the filter falls back to
    comparing normalized root-relative paths.
    """

    def __init__(self, root_path: str, output_path: str, respect_ignore_files: bool = True) -> None:
        self.root_path = os.path.abspath(root_path)
        self.output_path = os.path.abspath(output_path)
        self.respect_ignore_files = respect_ignore_files

        self._output_resolved = _resolve_strict(self.output_path)
        self._output_relative = os.path.normpath(to_relative(self.output_path, self.root_path))

    def root_rules(self) -> IgnoreRules:
        """Return the ignore stack for the scan root (empty if disabled)."""
        if not self.respect_ignore_files:
            return IgnoreRules()
        return IgnoreRules.load_root(self.root_path)

    def rules_for(self, rules: IgnoreRules, rel_dir: str) -> IgnoreRules:
        """Push the ignore files of 'rel_dir' on top of 'rules'."""
        if not self.respect_ignore_files:
            return rules
        return rules.for_directory(self.root_path, rel_dir)

    def should_visit(self, rel_path: str, is_dir: bool, rules: IgnoreRules) -> bool:
        """
        Decide whether an entry is visible to the walk.

        Args:
            rel_path: '/'-separated path relative to the scan root.
            is_dir: Whether the entry is a directory (not following links).
            rules: Ignore stack in force for the entry's parent directory.

        Returns:
            bool: False for the VCS directory, the artifact itself and
                  ignored entries; True otherwise (dot-files included).
        """
        name = rel_path.rsplit("/", 1)[-1]
        if name == VCS_DIR_NAME:
            return False

        if self.is_output_artifact(rel_path):
            return False

        if self.respect_ignore_files and rules.is_ignored(rel_path, is_dir):
            logger.debug(f"Ignored by rules: {rel_path}")
            return False

        return True

    def is_output_artifact(self, rel_path: str) -> bool:
        """Check whether a root-relative path denotes the artifact."""
        abs_path = os.path.join(self.root_path, rel_path)
        entry_resolved = _resolve_strict(abs_path)

        if entry_resolved is not None and self._output_resolved is not None:
            return entry_resolved == self._output_resolved

        return os.path.normpath(rel_path) == self._output_relative

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _resolve_strict(path: str) -> Optional[Path]:
    """Resolve symlinks and relative segments; None if the path is missing."""
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError):
        return None
