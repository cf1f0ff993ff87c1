from __future__ import annotations

"""
Logging Core Orchestrator.

Owns the lifecycle of the root logger for CovTree. Records are pushed
through a QueueHandler and drained by a QueueListener thread, so that the
GUI event loop and background refresh workers never block on file I/O.
Configuration is idempotent unless explicitly forced.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from covtree.infra.fs import get_user_data_dir
from covtree.infra.logging.config import LEVEL_MAP, LoggingConfig
from covtree.infra.logging.handlers import (
    create_rotating_file_handler,
    is_own_handler,
    tag_handler,
)

# Attributes stored on the root logger to track our own setup
CONFIGURED_FLAG_ATTR: str = "_covtree_configured"
QUEUE_LISTENER_ATTR: str = "_covtree_queue_listener"

DEFAULT_LOG_FILE = "covtree.log"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = DEFAULT_LOG_FILE) -> str:
    """
    Resolve the persistent log file inside the user data directory.

    Args:
        file_name: Log file name.

    Returns:
        str: Absolute path '<data dir>/logs/<file_name>'.
    """
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once, routing records through a queue.

    Subsequent calls are no-ops unless 'force' is set, in which case the
    previously installed handlers and listener are torn down first.

    Args:
        cfg: Logging configuration.
        force: Re-initialize even if already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    try:
        if getattr(root, CONFIGURED_FLAG_ATTR, False) and not force:
            return root

        level = parse_level(cfg.level)
        root.setLevel(level)

        _detach_own_handlers(root)
        _stop_listener(root)

        sinks = _build_sinks(cfg, level)
        if not sinks:
            return root

        log_queue: queue.Queue = queue.Queue(-1)
        queue_handler = QueueHandler(log_queue)
        tag_handler(queue_handler)

        listener = QueueListener(log_queue, *sinks, respect_handler_level=True)
        listener.start()
        root.addHandler(queue_handler)

        setattr(root, QUEUE_LISTENER_ATTR, listener)
        setattr(root, CONFIGURED_FLAG_ATTR, True)
        atexit.register(stop_listener_safely, listener)
        return root

    except Exception as e:
        return _install_emergency_console(root, e)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger (normally called with __name__)."""
    return logging.getLogger(name)


def get_recent_logs(n_lines: int = 100, log_path: Optional[str] = None) -> str:
    """
    Return the last lines of the persistent log file.

    Args:
        n_lines: Maximum number of lines to return.
        log_path: Log file to read; defaults to the standard location.

    Returns:
        str: Log tail, or a short explanation when it cannot be read.
    """
    path = log_path or get_default_log_path()
    if not os.path.exists(path):
        return "Log file not found."

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return "".join(f.readlines()[-n_lines:])
    except OSError as e:
        return f"Error retrieving logs: {e}"


def parse_level(level: Optional[str]) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    if not level:
        return logging.INFO
    return LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


def stop_listener_safely(listener: Optional[QueueListener]) -> None:
    """Stop a QueueListener, tolerating listeners that were already stopped."""
    if listener is None:
        return
    if getattr(listener, "_thread", None) is None:
        return
    try:
        listener.stop()
    except (AttributeError, RuntimeError):
        pass


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _build_sinks(cfg: LoggingConfig, level: int) -> List[logging.Handler]:
    """Create the console and file handlers drained by the listener."""
    sinks: List[logging.Handler] = []

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(cfg.console_fmt))
        tag_handler(console)
        sinks.append(console)

    if cfg.log_file:
        file_handler = create_rotating_file_handler(
            cfg.log_file,
            level,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
        )
        if file_handler is not None:
            sinks.append(file_handler)

    return sinks


def _detach_own_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if is_own_handler(handler):
            root.removeHandler(handler)
            handler.close()


def _stop_listener(root: logging.Logger) -> None:
    listener = getattr(root, QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        stop_listener_safely(listener)
        setattr(root, QUEUE_LISTENER_ATTR, None)


def _install_emergency_console(root: logging.Logger, error: Exception) -> logging.Logger:
    """Fall back to a plain stderr handler when the queue setup fails."""
    _detach_own_handlers(root)
    _stop_listener(root)
    root.setLevel(logging.INFO)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
    tag_handler(console)
    root.addHandler(console)

    root.warning(f"Logging infrastructure failed ({error}). Switched to emergency console.")
    return root
