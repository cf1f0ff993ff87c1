from __future__ import annotations

"""
Coverage Tree Generator.

Turns a flat list of per-file coverage records into a sorted forest of
directory and file nodes. Directory counters are rolled up bottom-up from
their descendant files; sibling order is deterministic (directories first,
then locale-aware name order).
"""

import logging
import unicodedata
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple, Union

from covtree.core.analysis.paths import split_path
from covtree.core.pipeline.components.filters import filter_records
from covtree.domain.coverage_models import (
    METRIC_KINDS,
    CoverageSummary,
    FileCoverageRecord,
    Forest,
    MetricTotals,
    NodeKind,
    TreeNode,
    coverage_percent,
)

logger = logging.getLogger(__name__)

# Root collation order of ASCII punctuation and symbols (before digits and letters)
_PUNCTUATION_ORDER = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"
_PUNCTUATION_RANK: Dict[str, int] = {ch: rank for rank, ch in enumerate(_PUNCTUATION_ORDER)}

# base weights, accent-folded name, uppercase flags, raw name
CollationKey = Tuple[Tuple[Tuple[int, int], ...], str, Tuple[bool, ...], str]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def generate_coverage_tree(
        records: Iterable[FileCoverageRecord],
        include_tests: bool = False,
        exclude_patterns: Optional[List[str]] = None,
) -> Forest:
    """
    Run the full construction pipeline: filter, build, aggregate and sort.

    Args:
        records: Flat coverage records, in any order.
        include_tests: Keep test suites in the rollup.
        exclude_patterns: Regexes of record paths to leave out.

    Returns:
        Forest: Sorted, fully aggregated top-level nodes.
    """
    selected = filter_records(records, include_tests=include_tests, exclude_patterns=exclude_patterns)
    forest = sort_tree(aggregate_tree(build_tree(selected)))
    logger.debug(f"Coverage tree generated: {len(selected)} files, {len(forest)} top-level nodes.")
    return forest


def build_tree(records: Iterable[FileCoverageRecord]) -> Forest:
    """
    Insert every record into a keyed hierarchy and materialize it as a forest.

    Directory nodes are created on demand (first seen wins). The terminal
    segment becomes a file node carrying the record metrics verbatim; a
    repeated path, or a name already used by a directory, is overwritten
    by the later record. Records with no path segments are skipped.

    Args:
        records: Flat coverage records.

    Returns:
        Forest: Unsorted nodes; directory counters are not aggregated yet.
    """
    root: _Level = {}
    skipped = 0

    for record in records:
        segments = split_path(record.path)
        if not segments:
            skipped += 1
            continue

        level = root
        current_path = ""
        for segment in segments[:-1]:
            current_path = f"{current_path}/{segment}" if current_path else segment
            entry = level.get(segment)
            if not isinstance(entry, _DirectoryEntry):
                entry = _DirectoryEntry(segment, current_path)
                level[segment] = entry
            level = entry.children

        file_name = segments[-1]
        level[file_name] = _file_node(file_name, record)

    if skipped:
        logger.debug(f"Tree builder: skipped {skipped} records without path segments.")

    return _materialize(root)


def aggregate_tree(forest: Forest) -> Forest:
    """
    Replace every directory's counters with the sums over its descendants.

    Missing metric pairs on files contribute zero, so a directory's
    percentage only reflects the files that reported that metric.

    Args:
        forest: Nodes produced by build_tree.

    Returns:
        Forest: New nodes with aggregated directory counters and percentages.
    """
    return [_aggregate_node(node) for node in forest]


def sort_tree(forest: Forest) -> Forest:
    """
    Order every sibling set: directories before files, then by name.

    Args:
        forest: Nodes to order.

    Returns:
        Forest: New nodes with recursively sorted children.
    """
    ordered = sorted(forest, key=node_sort_key)
    return [
        replace(node, children=tuple(sort_tree(list(node.children)))) if node.is_directory else node
        for node in ordered
    ]


def node_sort_key(node: TreeNode) -> Tuple[int, CollationKey]:
    """Sort key placing directories first, then locale-aware name order."""
    return (0 if node.is_directory else 1), locale_sort_key(node.name)


def locale_sort_key(name: str) -> CollationKey:
    """
    Build a collation key approximating a locale-aware string comparison.

    Compares base characters first (case and accents ignored), then accents,
    then case with lowercase before uppercase, and finally the raw name so
    that the order is total and reproducible across platforms.

    Base characters are weighted as in the Unicode root collation:
    whitespace and punctuation first (in _PUNCTUATION_ORDER, so '_' sorts
    before '-'), then other symbols, then digits, then letters.

    Args:
        name: Node name.

    Returns:
        CollationKey: Comparable collation key.
    """
    folded = name.casefold()
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(ch)
    )
    return tuple(_primary_weight(ch) for ch in base), folded, tuple(ch.isupper() for ch in name), name


def _primary_weight(ch: str) -> Tuple[int, int]:
    rank = _PUNCTUATION_RANK.get(ch)
    if rank is not None:
        return 0, rank
    if ch.isspace():
        return 0, -1
    if ch.isdigit():
        return 2, ord(ch)
    if not ch.isalpha():
        return 1, ord(ch)
    return 3, ord(ch)


def summarize_records(records: Iterable[FileCoverageRecord]) -> CoverageSummary:
    """
    Total every metric family over a set of records.

    Args:
        records: Flat coverage records.

    Returns:
        CoverageSummary: File count plus covered/total sums per metric.
    """
    sums: Dict = {kind: [0, 0] for kind in METRIC_KINDS}
    file_count = 0
    for record in records:
        file_count += 1
        for kind in METRIC_KINDS:
            covered, total = record.counts(kind)
            sums[kind][0] += covered or 0
            sums[kind][1] += total or 0

    return CoverageSummary(
        file_count=file_count,
        metrics={kind: MetricTotals(covered=c, total=t) for kind, (c, t) in sums.items()},
    )

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (CONSTRUCTION)
# -----------------------------------------------------------------------------

class _DirectoryEntry:
    """Mutable build-time directory holding children keyed by name."""

    __slots__ = ("name", "path", "children")

    def __init__(self, name: str, path: str) -> None:
        self.name = name
        self.path = path
        self.children: _Level = {}


_Level = Dict[str, Union[_DirectoryEntry, TreeNode]]


def _file_node(name: str, record: FileCoverageRecord) -> TreeNode:
    """Create a leaf node copying the record metrics verbatim."""
    return TreeNode(
        name=name,
        path=record.path,
        kind=NodeKind.FILE,
        lines_covered=record.lines_covered,
        lines_total=record.lines_total,
        statements_covered=record.statements_covered,
        statements_total=record.statements_total,
        branches_covered=record.branches_covered,
        branches_total=record.branches_total,
        functions_covered=record.functions_covered,
        functions_total=record.functions_total,
        coverage_percent=coverage_percent(record.lines_covered, record.lines_total),
    )


def _materialize(level: _Level) -> Forest:
    """Convert keyed build-time containers into immutable node tuples."""
    nodes: Forest = []
    for entry in level.values():
        if isinstance(entry, _DirectoryEntry):
            nodes.append(TreeNode(
                name=entry.name,
                path=entry.path,
                kind=NodeKind.DIRECTORY,
                children=tuple(_materialize(entry.children)),
            ))
        else:
            nodes.append(entry)
    return nodes

# -----------------------------------------------------------------------------
# INTERNAL HELPERS (AGGREGATION)
# -----------------------------------------------------------------------------

def _aggregate_node(node: TreeNode) -> TreeNode:
    """Post-order fold of descendant counters into a directory node."""
    if not node.is_directory:
        return node

    children = tuple(_aggregate_node(child) for child in node.children)

    totals: Dict[str, int] = {}
    for kind in METRIC_KINDS:
        covered_sum = 0
        total_sum = 0
        for child in children:
            covered, total = child.counts(kind)
            covered_sum += covered or 0
            total_sum += total or 0
        totals[f"{kind.value}_covered"] = covered_sum
        totals[f"{kind.value}_total"] = total_sum

    return replace(
        node,
        children=children,
        coverage_percent=coverage_percent(totals["lines_covered"], totals["lines_total"]),
        **totals,
    )
