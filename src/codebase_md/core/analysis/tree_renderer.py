from __future__ import annotations

"""
Tree Renderer.

Converts a TreeNode hierarchy into its textual listing, one line per node
in pre-order, using the usual box-drawing connectors.
"""

from typing import Iterator

from codebase_md.domain.tree_models import TreeNode

_BRANCH = "├── "
_LAST_BRANCH = "└── "
_PIPE_INDENT = "│   "
_SPACE_INDENT = "    "

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree_lines(root: TreeNode) -> Iterator[str]:
    """
    Yield the listing of 'root', starting with its own label.

    Args:
        root: Node to render (normally the "." sentinel).

    Yields:
        str: One line per node, without trailing newline.
    """
    yield root.label
    yield from _render_children(root, "")


def _render_children(node: TreeNode, prefix: str) -> Iterator[str]:
    """Recursively render the children of 'node' under 'prefix'."""
    total = len(node.children)

    for i, child in enumerate(node.children):
        is_last = (i == total - 1)
        connector = _LAST_BRANCH if is_last else _BRANCH
        yield f"{prefix}{connector}{child.label}"

        new_prefix = prefix + (_SPACE_INDENT if is_last else _PIPE_INDENT)
        yield from _render_children(child, new_prefix)
