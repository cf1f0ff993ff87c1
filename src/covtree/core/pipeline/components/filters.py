from __future__ import annotations

"""
Record Filtering Engine.

Implements regex-based exclusion of coverage records and the production
filter that strips test suites before the tree is built, so that directory
rollups only reflect source files.
"""

import logging
import re
from typing import Iterable, List, Optional

from covtree.core.analysis.paths import is_test_file
from covtree.domain.coverage_models import FileCoverageRecord

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

def default_exclude_patterns() -> List[str]:
    """
    Get the default record exclusion patterns.

    Returns:
        List[str]: Empty list; every record is kept unless configured.
    """
    return []

# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: Iterable[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed expressions are discarded so that a bad user pattern never
    aborts tree generation.

    Args:
        patterns: Raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error:
            logger.debug(f"Discarding malformed pattern: {p!r}")
            continue
    return compiled


def matches_any(name: str, compiled_patterns: List[re.Pattern]) -> bool:
    """
    Verify if a string matches at least one compiled regex pattern.

    Args:
        name: Path to evaluate.
        compiled_patterns: Pre-compiled regex objects.

    Returns:
        bool: True if any match is found, False otherwise.
    """
    return any(rx.search(name) for rx in compiled_patterns)

# -----------------------------------------------------------------------------
# RECORD SELECTION
# -----------------------------------------------------------------------------

def filter_records(
        records: Iterable[FileCoverageRecord],
        include_tests: bool = False,
        exclude_patterns: Optional[List[str]] = None,
) -> List[FileCoverageRecord]:
    """
    Select the records that take part in the coverage rollup.

    Args:
        records: Flat coverage records.
        include_tests: Keep test suites instead of dropping them.
        exclude_patterns: Regexes searched against the full record path.

    Returns:
        List[FileCoverageRecord]: Surviving records in input order.
    """
    exclude_rx = compile_patterns(exclude_patterns or default_exclude_patterns())

    selected: List[FileCoverageRecord] = []
    skipped_tests = 0
    skipped_patterns = 0
    for record in records:
        if not include_tests and is_test_file(record.path):
            skipped_tests += 1
            continue
        if exclude_rx and matches_any(record.path, exclude_rx):
            skipped_patterns += 1
            continue
        selected.append(record)

    logger.debug(
        f"Record filter: kept {len(selected)}, "
        f"dropped {skipped_tests} test files and {skipped_patterns} excluded paths."
    )
    return selected
