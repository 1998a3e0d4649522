from __future__ import annotations

"""
Logging Settings.

The CLI needs only a level, a switch for stderr output and an optional
rotating log file. Formats are fixed here.
"""

import logging
from dataclasses import dataclass
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Diagnostics requested by one CLI invocation.

    Attributes:
        level: Level name ("DEBUG" under --debug, "INFO" otherwise).
        console: Emit records on stderr.
        log_file: Value of --log-file, if given.
        max_bytes: Rollover size of the log file.
        backup_count: Rotated log files to keep.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 1024 * 1024
    backup_count: int = 2


def parse_level(level: Optional[str]) -> int:
    """Map a level name onto its numeric value; unknown names mean INFO."""
    value = logging.getLevelName((level or "").strip().upper())
    return value if isinstance(value, int) else logging.INFO
