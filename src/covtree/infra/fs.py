from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the OS-specific application data directory and input location
helpers shared by configuration, logging and the CLI/GUI loaders.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "CovTree"
UNIX_APP_DIR_NAME = ".covtree"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/CovTree
    - Linux/Mac: ~/.covtree

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    # Windows specific resolution
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def is_remote_location(location: Optional[str]) -> bool:
    """Return True when an input location is an http(s) URL."""
    value = (location or "").strip().lower()
    return value.startswith("http://") or value.startswith("https://")


def normalize_path(path: Optional[str], fallback: str = "") -> str:
    """
    Normalize a local path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). URLs are returned untouched.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path, URL, or empty string.
    """
    p = (path or "").strip() or fallback
    if not p or is_remote_location(p):
        return p
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)
