from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, artifact lifecycle helpers and lossless-to-
display path conversion. Acts as a thin abstraction over 'os' so the core
stages see uniform, '/'-separated relative paths on every platform.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_output_path(root_path: str, output: str, relative_to_root: bool = True) -> str:
    """
    Calculate the absolute artifact path.

    Args:
        root_path: Absolute scan root.
        output: Raw artifact path or file name.
        relative_to_root: Anchor relative paths at the scan root instead of
                          the current working directory.

    Returns:
        str: Absolute artifact path.
    """
    p = os.path.expandvars(os.path.expanduser(output))
    if not os.path.isabs(p) and relative_to_root:
        p = os.path.join(root_path, p)
    return os.path.abspath(p)


def to_relative(path: str, root_path: str) -> str:
    """
    Express 'path' relative to 'root_path' with '/' separators and no './'.
    """
    rel = os.path.relpath(path, root_path)
    rel = rel.replace(os.sep, "/")
    while rel.startswith("./"):
        rel = rel[2:]
    return rel


def display_path(rel_path: str) -> str:
    """
    Render a path for the document, replacing undecodable bytes with U+FFFD.

    Filenames that are not valid UTF-8 arrive as surrogate escapes; they
    cannot be written to a UTF-8 stream as-is.
    """
    return os.fsencode(rel_path).decode("utf-8", errors="replace")

# -----------------------------------------------------------------------------
# ARTIFACT LIFECYCLE
# -----------------------------------------------------------------------------

def remove_existing_artifact(output_path: str) -> bool:
    """
    Delete a previous artifact so the run starts from a fresh file.

    Args:
        output_path: Absolute artifact path.

    Returns:
        bool: True if a file was removed.

    Raises:
        OSError: If the file exists but cannot be removed.
    """
    if not os.path.lexists(output_path):
        return False
    os.remove(output_path)
    return True


def get_file_size(path: str) -> Optional[int]:
    """
    Return the size of 'path' in bytes, or None if it cannot be stat-ed.
    """
    try:
        return os.path.getsize(path)
    except OSError as e:
        logger.warning(f"Could not get file metadata for {path}: {e}")
        return None
