from __future__ import annotations

"""
Document Serialization.

Writes the final artifact incrementally: the structure section rendered
from the tree, then one escaped block per text file in the walker's order.
Files are classified lazily, one at a time, as the content section is
produced. Write errors on the output stream propagate to the caller.
"""

import logging
import os
from typing import Iterable, TextIO

from codebase_md.core.analysis.tree_renderer import render_tree_lines
from codebase_md.core.pipeline.components.classifier import classify_file
from codebase_md.core.pipeline.components.reader import read_text_file
from codebase_md.core.processing.escaper import escape_markup
from codebase_md.domain.constants import (
    ATTR_SOURCE,
    PEEK_BYTES,
    TAG_CODEBASE,
    TAG_FILE,
    TAG_STRUCTURE,
)
from codebase_md.domain.content_models import BinaryPolicy, Classification, SerializationStats
from codebase_md.domain.tree_models import ProjectTree
from codebase_md.infra.fs import display_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def serialize_document(
        tree: ProjectTree,
        paths: Iterable[str],
        root_path: str,
        stream: TextIO,
        policy: BinaryPolicy = BinaryPolicy.PERMISSIVE,
        peek_bytes: int = PEEK_BYTES,
) -> SerializationStats:
    """
    Write the complete document to 'stream'.

    Output layout:
    <codebase>
    <project_structure>
    <tree listing>
    <D> directories, <F> files
    </project_structure>

    <file src="path">
    <escaped content>
    </file>

    </codebase>

    Args:
        tree: Structure and counts built from 'paths'.
        paths: The same flat, sorted path list the tree was built from.
        root_path: Directory the paths are relative to.
        stream: Text stream opened for writing.
        policy: Treatment of binary-but-plausibly-text prefixes.
        peek_bytes: Prefix size for classification.

    Returns:
        SerializationStats: Counters for the content section.

    Raises:
        OSError: If writing to the stream fails.
    """
    stream.write(f"<{TAG_CODEBASE}>\n")

    logger.info("Generating tree structure...")
    write_structure_section(tree, stream)

    logger.info("Processing files...")
    stats = SerializationStats()
    for rel_path in paths:
        if not os.path.isfile(os.path.join(root_path, rel_path)):
            continue
        write_file_entry(rel_path, root_path, stream, stats, policy, peek_bytes)

    stream.write(f"</{TAG_CODEBASE}>\n")
    return stats


def write_structure_section(tree: ProjectTree, stream: TextIO) -> None:
    """Write the tree listing and summary line wrapped in structure tags."""
    stream.write(f"<{TAG_STRUCTURE}>\n")
    for line in render_tree_lines(tree.root):
        stream.write(f"{line}\n")
    stream.write(f"{tree.counts.summary_line()}\n")
    stream.write(f"</{TAG_STRUCTURE}>\n")
    stream.write("\n")


def write_file_entry(
        rel_path: str,
        root_path: str,
        stream: TextIO,
        stats: SerializationStats,
        policy: BinaryPolicy = BinaryPolicy.PERMISSIVE,
        peek_bytes: int = PEEK_BYTES,
) -> None:
    """
    Classify one file and, if it is text, write its block.

    A file that passes classification but fails full decoding still gets
    its tags, with an inline comment in place of the content.
    """
    shown = display_path(rel_path)
    classified = classify_file(root_path, rel_path, policy, peek_bytes)

    if classified.classification is Classification.BINARY:
        logger.info(f"Skipping {shown} (likely binary or image file)")
        stats.skipped_binary += 1
        return

    if classified.classification is Classification.UNREADABLE:
        stats.unreadable += 1
        return

    logger.info(f"Adding {shown}")
    stream.write(f'<{TAG_FILE} {ATTR_SOURCE}="{escape_markup(shown)}">\n')

    try:
        content = read_text_file(root_path, rel_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read file {shown} as UTF-8 text: {e}. Skipping content.")
        stream.write(f"<!-- Error reading file: {_comment_text(str(e))} -->\n")
        stats.decode_errors += 1
    else:
        stream.write(escape_markup(content))
        stream.write("\n")
        stats.included += 1

    stream.write(f"</{TAG_FILE}>\n")
    stream.write("\n")

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _comment_text(message: str) -> str:
    """Escape a message for use inside a markup comment ('--' is not allowed there)."""
    text = escape_markup(display_path(message))
    while "--" in text:
        text = text.replace("--", "- -")
    return text
