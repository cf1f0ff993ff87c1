from __future__ import annotations

"""
Logging Handler Factories.

Creates the rotating file sink and tags every handler installed by CovTree
so that reconfiguration only removes our own handlers, never those added
by host applications or test runners.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

HANDLER_TAG_ATTR: str = "_covtree_handler"


def tag_handler(handler: logging.Handler) -> None:
    """Mark a handler as installed by CovTree."""
    setattr(handler, HANDLER_TAG_ATTR, True)


def is_own_handler(handler: logging.Handler) -> bool:
    """Return True if the handler carries the CovTree tag."""
    return bool(getattr(handler, HANDLER_TAG_ATTR, False))


def create_rotating_file_handler(
        log_file: str,
        level: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Create a tagged RotatingFileHandler, creating parent folders as needed.

    Args:
        log_file: Target log file.
        level: Minimum level handled.
        formatter: Record formatter.
        max_bytes: Rollover size.
        backup_count: Number of rotated files kept.

    Returns:
        Optional[RotatingFileHandler]: The handler, or None if the file
        cannot be opened (a warning is written to stderr).
    """
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{log_file}': {e}\n")
        return None

    handler.setLevel(level)
    handler.setFormatter(formatter)
    tag_handler(handler)
    return handler
