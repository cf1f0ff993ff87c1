from __future__ import annotations

"""
Historical Coverage Overlay.

Annotates an already aggregated coverage forest with previous-period values
and signed deltas. Also selects which historical run represents a
comparison period (1w/1m/1y) and reduces its records to a path-keyed
coverage map. Aggregated counters are never modified by this stage.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional

from covtree.core.analysis.paths import is_test_file
from covtree.domain.constants import DAY_MS, HISTORICAL_PERIODS
from covtree.domain.coverage_models import (
    CoverageKind,
    CoverageRun,
    FileCoverageRecord,
    Forest,
    HistoricalCoverage,
    TreeNode,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# RUN SELECTION
# -----------------------------------------------------------------------------

def select_historical_run(
        runs: Iterable[CoverageRun],
        reference_ms: int,
        period: str,
) -> Optional[CoverageRun]:
    """
    Pick the run closest to 'reference - period' inside the period window.

    Runs without records never qualify. Ties keep the first run in input
    order.

    Args:
        runs: Candidate historical runs.
        reference_ms: Start time of the current run (epoch milliseconds).
        period: One of the HISTORICAL_PERIODS keys.

    Returns:
        Optional[CoverageRun]: The selected run, or None.

    Raises:
        ValueError: If the period key is unknown.
    """
    if period not in HISTORICAL_PERIODS:
        raise ValueError(f"Unknown historical period: {period!r}")

    offset_days, window_days = HISTORICAL_PERIODS[period]
    target = reference_ms - offset_days * DAY_MS
    window_start = target - window_days * DAY_MS
    window_end = target + window_days * DAY_MS

    selected: Optional[CoverageRun] = None
    closest = float("inf")
    for run in runs:
        if not run.records:
            continue
        if run.started_at < window_start or run.started_at > window_end:
            continue
        distance = abs(run.started_at - target)
        if distance < closest:
            closest = distance
            selected = run

    if selected is None:
        logger.info(f"No historical run with coverage found for period '{period}'.")
    else:
        logger.debug(f"Historical run selected for '{period}': startedAt={selected.started_at}")
    return selected


def historical_coverage_map(
        records: Iterable[FileCoverageRecord],
        kind: CoverageKind = CoverageKind.LINES,
) -> Dict[str, float]:
    """
    Reduce historical records to a path -> coverage percentage map.

    Test files are skipped. A file without data for the requested metric
    falls back to its line coverage, and maps to 0.0 only when neither is
    defined.

    Args:
        records: Records of the historical run.
        kind: Metric family to read.

    Returns:
        Dict[str, float]: Coverage percentage keyed by record path.
    """
    coverage_by_path: Dict[str, float] = {}
    for record in records:
        if is_test_file(record.path):
            continue
        value = record.coverage(kind)
        if value is None and kind is not CoverageKind.LINES:
            value = record.coverage(CoverageKind.LINES)
        coverage_by_path[record.path] = value if value is not None else 0.0
    return coverage_by_path

# -----------------------------------------------------------------------------
# OVERLAY
# -----------------------------------------------------------------------------

def apply_historical_overlay(
        forest: Forest,
        historical: Mapping[str, float],
        kind: CoverageKind = CoverageKind.LINES,
) -> Forest:
    """
    Attach previous-period coverage and deltas to the nodes of a forest.

    Files look up their own path. Directories use an explicit entry for
    their synthetic path when present, otherwise the plain mean of their
    annotated children, and are only annotated when their own current
    percentage is defined.

    Args:
        forest: Aggregated and sorted forest.
        historical: Previous coverage percentage keyed by node path.
        kind: Metric family the current percentage is read from.

    Returns:
        Forest: New forest with 'historical_coverage' set where data exists.
    """
    return [_overlay_node(node, historical, kind) for node in forest]


def _overlay_node(node: TreeNode, historical: Mapping[str, float], kind: CoverageKind) -> TreeNode:
    current = node.coverage(kind)

    if not node.is_directory:
        previous = historical.get(node.path)
        if previous is None:
            return node
        change = current - previous if current is not None else 0.0
        return replace(node, historical_coverage=HistoricalCoverage(coverage=previous, change=change))

    children = tuple(_overlay_node(child, historical, kind) for child in node.children)

    previous = historical.get(node.path)
    if previous is None:
        annotated: List[float] = [
            child.historical_coverage.coverage for child in children if child.historical_coverage
        ]
        previous = sum(annotated) / len(annotated) if annotated else None

    overlay = None
    if current is not None and previous is not None:
        overlay = HistoricalCoverage(coverage=previous, change=current - previous)

    return replace(node, children=children, historical_coverage=overlay)
