from __future__ import annotations

"""
Logging Bootstrap.

Attaches the CLI's handlers directly to the root logger. Records are
written synchronously on the calling thread; every module logs through
logging.getLogger(__name__).
"""

import logging

from codebase_md.infra.logging.config import LoggingConfig, parse_level
from codebase_md.infra.logging.handlers import (
    build_console_handler,
    build_file_handler,
    is_owned,
)

_CONFIGURED_FLAG_ATTR = "_codebase_md_configured"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Install the console and file handlers on the root logger.

    Calling it again is a no-op unless 'force' is set, in which case the
    handlers from the previous call are closed and replaced.

    Args:
        cfg: Requested diagnostics.
        force: Replace an existing configuration.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    _detach_owned_handlers(root)

    level = parse_level(cfg.level)
    root.setLevel(level)

    if cfg.console:
        root.addHandler(build_console_handler(level))

    if cfg.log_file:
        file_handler = build_file_handler(cfg.log_file, level, cfg.max_bytes, cfg.backup_count)
        if file_handler is not None:
            root.addHandler(file_handler)

    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush, close and remove the handlers installed by configure_logging."""
    root = logging.getLogger()
    _detach_owned_handlers(root)
    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _detach_owned_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if is_owned(handler):
            root.removeHandler(handler)
            handler.flush()
            handler.close()
