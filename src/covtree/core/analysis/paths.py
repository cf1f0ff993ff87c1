from __future__ import annotations

"""
Path Classification and Segmentation.

Splits slash- or backslash-separated record paths into ordered segments and
classifies files as test suites or production sources using JS/TS naming
conventions (*.test.ts, *.spec.tsx, and generated artifacts such as
*.test.ts.map).
"""

import re
from typing import List, Pattern

# -----------------------------------------------------------------------------
# REGEX CONSTANTS
# -----------------------------------------------------------------------------

_SEPARATOR_RX: Pattern[str] = re.compile(r"[/\\]")

_TEST_FILE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"\.test\.(ts|tsx|js|jsx)$", re.IGNORECASE),
    re.compile(r"\.spec\.(ts|tsx|js|jsx)$", re.IGNORECASE),
    # Generated artifacts, e.g. file.test.ts.map
    re.compile(r"\.test\.(ts|tsx|js|jsx)\.", re.IGNORECASE),
    re.compile(r"\.spec\.(ts|tsx|js|jsx)\.", re.IGNORECASE),
]

# -----------------------------------------------------------------------------
# PATH SEGMENTATION
# -----------------------------------------------------------------------------

def split_path(path: str) -> List[str]:
    """
    Split a path into its non-empty segments.

    Accepts forward slashes, backslashes, or a mix of both. Leading and
    doubled separators produce no empty segments.

    Args:
        path: Raw file path.

    Returns:
        List[str]: Ordered segments (directories..., filename).
    """
    if not path:
        return []
    return [segment for segment in _SEPARATOR_RX.split(path) if segment]


def get_file_name(path: str) -> str:
    """Return the last segment of a path, or an empty string."""
    segments = split_path(path)
    return segments[-1] if segments else ""


def get_directory_path(path: str) -> str:
    """
    Return every segment but the last, joined with forward slashes.

    Args:
        path: Raw file path.

    Returns:
        str: Parent directory path, or an empty string for root-level files.
    """
    segments = split_path(path)
    if len(segments) <= 1:
        return ""
    return "/".join(segments[:-1])


def get_file_extension(path: str) -> str:
    """
    Return the substring after the last dot of the filename.

    Dotfiles keep their name as extension ('.gitignore' -> 'gitignore').

    Args:
        path: Raw file path.

    Returns:
        str: Extension without the dot, or an empty string.
    """
    file_name = get_file_name(path)
    _, dot, ext = file_name.rpartition(".")
    return ext if dot else ""

# -----------------------------------------------------------------------------
# FILE CLASSIFICATION LOGIC
# -----------------------------------------------------------------------------

def is_test_file(path: str) -> bool:
    """
    Classify a file as a test suite based on its filename.

    Only the '.test.<ext>' / '.spec.<ext>' tokens count, so helpers such as
    'test-utils.ts' or 'testHelpers.ts' remain source files.

    Args:
        path: File path or bare filename.

    Returns:
        bool: True if the filename matches a test pattern.
    """
    file_name = get_file_name(path)
    return any(rx.search(file_name) for rx in _TEST_FILE_PATTERNS)


def is_source_file(path: str) -> bool:
    """Return True for every path that is not a test file."""
    return not is_test_file(path)
