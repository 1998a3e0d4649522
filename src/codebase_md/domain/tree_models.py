from __future__ import annotations

"""
Directory Tree Structure Data Models.

Provides the immutable node and aggregate types produced by the tree
builder and consumed by the document serializer.
"""

from dataclasses import dataclass
from typing import Tuple

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TreeNode:
    """
    One path segment of the reconstructed hierarchy.

    Attributes:
        label: Final path component (the synthetic root uses ".").
        children: Child nodes, ordered by their full relative path.
    """
    label: str
    children: Tuple["TreeNode", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class DocumentCounts:
    """
    Aggregate directory/file totals of the flat path list.

    Attributes:
        directories: Paths that were directories when stat-ed.
        files: Paths that were regular files when stat-ed.
    """
    directories: int = 0
    files: int = 0

    def summary_line(self) -> str:
        return f"{self.directories} directories, {self.files} files"


@dataclass(frozen=True)
class ProjectTree:
    """Result of a tree build: the sentinel root plus its counts."""
    root: TreeNode
    counts: DocumentCounts
