from __future__ import annotations

"""
Directory Tree Builder.

Reconstructs the hierarchy of the scan root from the walker's flat path
list. Children are re-sorted here with the walker's own ordering key, so
the resulting tree does not depend on the order of the input list.
"""

import logging
import os
import stat
from typing import Dict, Iterable, List, Optional, Tuple

from codebase_md.core.pipeline.components.walker import path_sort_key
from codebase_md.domain.constants import ROOT_LABEL
from codebase_md.domain.tree_models import DocumentCounts, ProjectTree, TreeNode
from codebase_md.infra.fs import display_path

logger = logging.getLogger(__name__)

_SYNTHETIC_ROOT = ""

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_tree(paths: Iterable[str], root_path: str = ".") -> ProjectTree:
    """
    Build the display tree and the directory/file counts.

    Counting stats every path at call time: directories and regular files
    are counted, anything else (special files, entries deleted since the
    walk) is counted nowhere.

    Args:
        paths: '/'-separated paths relative to 'root_path'.
        root_path: Directory the paths are relative to.

    Returns:
        ProjectTree: Root node labelled "." and the aggregate counts.
    """
    children_map: Dict[str, List[str]] = {}
    directories = 0
    files = 0

    for path in dict.fromkeys(paths):
        parent = path.rsplit("/", 1)[0] if "/" in path else _SYNTHETIC_ROOT
        children_map.setdefault(parent, []).append(path)

        kind = _stat_kind(os.path.join(root_path, path))
        if kind is not None and stat.S_ISDIR(kind):
            directories += 1
        elif kind is not None and stat.S_ISREG(kind):
            files += 1

    for children in children_map.values():
        children.sort(key=path_sort_key)

    materialized = _materialize(_SYNTHETIC_ROOT, children_map)
    root = TreeNode(label=ROOT_LABEL, children=materialized.children)

    counts = DocumentCounts(directories=directories, files=files)
    logger.debug(f"Tree built: {counts.summary_line()}")
    return ProjectTree(root=root, counts=counts)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _materialize(path: str, children_map: Dict[str, List[str]]) -> TreeNode:
    """Depth-first construction of the node for 'path' and its subtree."""
    label = display_path(path.rsplit("/", 1)[-1]) if path else ROOT_LABEL
    children: Tuple[TreeNode, ...] = tuple(
        _materialize(child, children_map) for child in children_map.get(path, ())
    )
    return TreeNode(label=label, children=children)


def _stat_kind(abs_path: str) -> Optional[int]:
    """Return the st_mode of a path (following links), or None on failure."""
    try:
        return os.stat(abs_path).st_mode
    except OSError:
        return None
