from __future__ import annotations

"""
Content Classification Engine.

Inspects a bounded byte prefix of each file to decide whether its content
belongs in the document. This is a fast pre-filter: a file classified as
text may still fail the full UTF-8 decode performed by the serializer.
"""

import codecs
import logging
import os

from codebase_md.domain.constants import NON_TEXT_RATIO_LIMIT, PEEK_BYTES
from codebase_md.domain.content_models import (
    BinaryPolicy,
    Classification,
    ClassifiedFile,
    ContentType,
)
from codebase_md.infra.fs import display_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# BYTE-LEVEL CONSTANTS
# -----------------------------------------------------------------------------

# BEL, BS, TAB, LF, FF, CR, ESC plus printable ASCII
_TEXT_BYTES = frozenset({7, 8, 9, 10, 12, 13, 27} | set(range(0x20, 0x7F)))

_WIDE_BOMS = (
    codecs.BOM_UTF32_LE,
    codecs.BOM_UTF32_BE,
    codecs.BOM_UTF16_LE,
    codecs.BOM_UTF16_BE,
)

# -----------------------------------------------------------------------------
# CONTENT INSPECTION
# -----------------------------------------------------------------------------

def inspect_content(sample: bytes) -> ContentType:
    """
    Classify a byte prefix.

    Wide-encoding BOMs mark text. A NUL byte marks binary. A prefix that
    decodes as UTF-8 (tolerating a multi-byte sequence cut at the end) is
    text. Anything else is binary, unless most of its bytes still look
    like text, in which case it is BINARY_TEXTLIKE (e.g. Latin-1 sources).

    Args:
        sample: Leading bytes of a file.

    Returns:
        ContentType: The inspector verdict.
    """
    if not sample:
        return ContentType.TEXT

    if sample.startswith(_WIDE_BOMS):
        return ContentType.TEXT

    if b"\x00" in sample:
        return ContentType.BINARY

    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=False)
        return ContentType.TEXT
    except UnicodeDecodeError:
        pass

    non_text = sum(1 for b in sample if b not in _TEXT_BYTES and b < 0x80)
    high = sum(1 for b in sample if b >= 0x80)
    # High bytes count at half weight: legacy 8-bit encodings use them for letters
    ratio = (non_text + high / 2) / len(sample)
    if ratio <= NON_TEXT_RATIO_LIMIT:
        return ContentType.BINARY_TEXTLIKE
    return ContentType.BINARY


def is_included(content_type: ContentType, policy: BinaryPolicy) -> bool:
    """Apply the inclusion policy to an inspector verdict."""
    if content_type is ContentType.TEXT:
        return True
    if content_type is ContentType.BINARY_TEXTLIKE:
        return policy is BinaryPolicy.PERMISSIVE
    return False

# -----------------------------------------------------------------------------
# FILE CLASSIFICATION
# -----------------------------------------------------------------------------

def classify_file(
        root_path: str,
        rel_path: str,
        policy: BinaryPolicy = BinaryPolicy.PERMISSIVE,
        peek_bytes: int = PEEK_BYTES,
) -> ClassifiedFile:
    """
    Classify one file from at most 'peek_bytes' leading bytes.

    Args:
        root_path: Absolute scan root.
        rel_path: '/'-separated path relative to the root.
        policy: Treatment of BINARY_TEXTLIKE prefixes.
        peek_bytes: Maximum number of bytes read.

    Returns:
        ClassifiedFile: TEXT, BINARY or UNREADABLE (with the reason).
    """
    abs_path = os.path.join(root_path, rel_path)
    try:
        with open(abs_path, "rb") as f:
            sample = f.read(peek_bytes)
    except OSError as e:
        logger.warning(f"Could not determine file type for {display_path(rel_path)}: {e}. Skipping.")
        return ClassifiedFile(rel_path, Classification.UNREADABLE, reason=str(e))

    content_type = inspect_content(sample)
    if is_included(content_type, policy):
        return ClassifiedFile(rel_path, Classification.TEXT)
    return ClassifiedFile(rel_path, Classification.BINARY)
