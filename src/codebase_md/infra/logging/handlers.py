from __future__ import annotations

"""
Handler Factories.

Builds the stderr and log-file handlers and marks them as owned, so a later
reconfiguration removes exactly what it installed and leaves foreign
handlers (pytest's capture, embedding applications) alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from codebase_md.infra.logging.config import CONSOLE_FORMAT, FILE_DATE_FORMAT, FILE_FORMAT

_OWNED_ATTR = "_codebase_md_owned"


def mark_owned(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _OWNED_ATTR, True)
    return handler


def is_owned(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _OWNED_ATTR, False))


def build_console_handler(level: int) -> logging.Handler:
    """Create the stderr handler; stdout stays reserved for results."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return mark_owned(handler)


def build_file_handler(
        log_file: str,
        level: int,
        max_bytes: int,
        backup_count: int,
) -> Optional[logging.Handler]:
    """
    Create the rotating log-file handler, creating its directory if needed.

    Args:
        log_file: Target path given on the command line.
        level: Numeric threshold.
        max_bytes: Rollover size.
        backup_count: Rotated files to keep.

    Returns:
        Optional[logging.Handler]: The handler, or None if the file cannot
                                   be opened (reported on stderr).
    """
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Could not open log file '{log_file}': {e}\n")
        return None

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return mark_owned(handler)
