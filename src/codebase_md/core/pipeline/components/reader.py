from __future__ import annotations

"""
Strict File Reading Component.

Loads a file's full content for inclusion in the document. Decoding is
strict UTF-8 and line endings are preserved byte-for-byte, so the caller
can report a decode failure instead of silently emitting altered text.
"""

import os

# -----------------------------------------------------------------------------
# READING OPERATIONS
# -----------------------------------------------------------------------------

def read_text_file(root_path: str, rel_path: str) -> str:
    """
    Read and decode a whole file as UTF-8.

    Args:
        root_path: Absolute scan root.
        rel_path: '/'-separated path relative to the root.

    Returns:
        str: The decoded content, CRLF and BOM untouched.

    Raises:
        OSError: If the file cannot be opened or read.
        UnicodeDecodeError: If the content is not valid UTF-8.
    """
    with open(os.path.join(root_path, rel_path), "rb") as f:
        data = f.read()
    return data.decode("utf-8")
