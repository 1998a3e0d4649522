from __future__ import annotations

"""
Directory Walker.

Traverses the scan root depth-first, consulting the PathFilter for every
entry and pruning rejected subtrees. Produces the single materialized,
globally sorted list of root-relative paths that both the structure and
the content sections are built from.
"""

import logging
import os
from typing import List, Tuple

from codebase_md.core.pipeline.components.filters import PathFilter
from codebase_md.core.pipeline.components.ignore_rules import IgnoreRules
from codebase_md.infra.fs import display_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def path_sort_key(rel_path: str) -> Tuple[str, ...]:
    """
    Ordering key shared by the walker and the tree builder.

    Compares component by component (case-sensitive, code-point order), so
    'a/z' sorts before 'a-b' and every directory is directly followed by
    its own descendants.
    """
    return tuple(rel_path.split("/"))


def walk_directory(root_path: str, path_filter: PathFilter) -> List[str]:
    """
    Collect every visible entry below the scan root.

    The root itself is never yielded. Symlinked directories are listed but
    not descended into. Unreadable directories are reported and skipped.

    Args:
        root_path: Directory to scan.
        path_filter: Visibility predicate bound to this run.

    Returns:
        List[str]: '/'-separated relative paths sorted by path_sort_key.
    """
    root_abs = os.path.abspath(root_path)
    collected: List[str] = []

    _walk_level(root_abs, "", path_filter.root_rules(), path_filter, collected)

    collected.sort(key=path_sort_key)
    logger.debug(f"Walk collected {len(collected)} entries under {root_abs}")
    return collected

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _walk_level(
        root_abs: str,
        rel_dir: str,
        rules: IgnoreRules,
        path_filter: PathFilter,
        collected: List[str],
) -> None:
    """Visit the children of one directory, recursing into kept subdirectories."""
    abs_dir = os.path.join(root_abs, rel_dir) if rel_dir else root_abs

    try:
        with os.scandir(abs_dir) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.warning(f"Failed to read directory {display_path(rel_dir or '.')}: {e}")
        return

    for entry in entries:
        rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name

        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            logger.warning(f"Failed to process entry {display_path(rel_path)}: {e}")
            continue

        if not path_filter.should_visit(rel_path, is_dir, rules):
            continue

        collected.append(rel_path)

        if is_dir:
            child_rules = path_filter.rules_for(rules, rel_path)
            _walk_level(root_abs, rel_path, child_rules, path_filter, collected)
