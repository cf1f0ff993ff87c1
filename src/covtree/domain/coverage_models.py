from __future__ import annotations

"""
Coverage Tree Data Models.

Provides the flat per-file coverage record consumed by the tree builder and
the recursive node structure produced for presentation layers. Nodes are
immutable: every pipeline stage returns a fresh forest instead of patching
an existing one.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    """Structural role of a node inside the coverage tree."""
    FILE = "file"
    DIRECTORY = "directory"


class CoverageKind(str, Enum):
    """Metric family read by consumers when displaying coverage."""
    LINES = "lines"
    STATEMENTS = "statements"
    BRANCHES = "branches"
    FUNCTIONS = "functions"


# Metric families in canonical order (serialization, aggregation, summaries)
METRIC_KINDS: Tuple[CoverageKind, ...] = (
    CoverageKind.LINES,
    CoverageKind.STATEMENTS,
    CoverageKind.BRANCHES,
    CoverageKind.FUNCTIONS,
)

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def coverage_percent(covered: Optional[int], total: Optional[int]) -> Optional[float]:
    """
    Derive a coverage percentage from a covered/total pair.

    The result is intentionally unclamped: inconsistent upstream data
    (covered > total) yields values above 100.

    Args:
        covered: Number of exercised units.
        total: Number of existing units.

    Returns:
        Optional[float]: 100 * covered / total, or None when total is 0 or absent.
    """
    if total is None or total <= 0:
        return None
    return 100.0 * (covered or 0) / total

# -----------------------------------------------------------------------------
# INPUT RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileCoverageRecord:
    """
    Flat coverage totals for a single file.

    Attributes:
        path: File path as reported upstream (forward or back slashes).
        lines_covered: Executed lines.
        lines_total: Executable lines.
        statements_covered: Optional executed statements.
        statements_total: Optional total statements.
        branches_covered: Optional executed branches.
        branches_total: Optional total branches.
        functions_covered: Optional executed functions.
        functions_total: Optional total functions.
    """
    path: str
    lines_covered: int = 0
    lines_total: int = 0
    statements_covered: Optional[int] = None
    statements_total: Optional[int] = None
    branches_covered: Optional[int] = None
    branches_total: Optional[int] = None
    functions_covered: Optional[int] = None
    functions_total: Optional[int] = None

    def counts(self, kind: CoverageKind) -> Tuple[Optional[int], Optional[int]]:
        """Return the (covered, total) pair for a metric family."""
        return getattr(self, f"{kind.value}_covered"), getattr(self, f"{kind.value}_total")

    def coverage(self, kind: CoverageKind = CoverageKind.LINES) -> Optional[float]:
        """Return the coverage percentage for a metric family."""
        return coverage_percent(*self.counts(kind))


@dataclass(frozen=True)
class CoverageRun:
    """
    A historical snapshot of coverage records.

    Attributes:
        started_at: Epoch timestamp in milliseconds.
        records: Records captured by the run.
    """
    started_at: int
    records: Tuple[FileCoverageRecord, ...] = ()

# -----------------------------------------------------------------------------
# TREE STRUCTURE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class HistoricalCoverage:
    """Previous-period coverage and the signed delta against the current value."""
    coverage: float
    change: float


@dataclass(frozen=True)
class TreeNode:
    """
    A file or directory entry of the coverage tree.

    File nodes carry the metrics of their record verbatim and use the
    original record path. Directory nodes carry metric sums over all
    descendant files and a synthetic forward-slash path.

    Attributes:
        name: Last path segment.
        path: Record path (files) or joined segment path (directories).
        kind: File or directory.
        children: Ordered child nodes (always empty for files).
        coverage_percent: Line coverage percentage, None when undefined.
        historical_coverage: Optional overlay attached by the comparison stage.
    """
    name: str
    path: str
    kind: NodeKind
    children: Tuple["TreeNode", ...] = ()

    lines_covered: Optional[int] = None
    lines_total: Optional[int] = None
    statements_covered: Optional[int] = None
    statements_total: Optional[int] = None
    branches_covered: Optional[int] = None
    branches_total: Optional[int] = None
    functions_covered: Optional[int] = None
    functions_total: Optional[int] = None

    coverage_percent: Optional[float] = None
    historical_coverage: Optional[HistoricalCoverage] = None

    @property
    def is_directory(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    def counts(self, kind: CoverageKind) -> Tuple[Optional[int], Optional[int]]:
        """Return the (covered, total) pair for a metric family."""
        return getattr(self, f"{kind.value}_covered"), getattr(self, f"{kind.value}_total")

    def coverage(self, kind: CoverageKind = CoverageKind.LINES) -> Optional[float]:
        """
        Read the coverage percentage for a metric family.

        Line coverage returns the stored value; other families are derived
        from their counters on demand.
        """
        if kind is CoverageKind.LINES:
            return self.coverage_percent
        return coverage_percent(*self.counts(kind))

    def to_dict(self, kind: CoverageKind = CoverageKind.LINES) -> Dict[str, object]:
        """
        Serialize the subtree using the camelCase keys of the external contract.

        Args:
            kind: Metric family the "coverage" key is read from.
        """
        data: Dict[str, object] = {
            "name": self.name,
            "path": self.path,
            "type": self.kind.value,
        }
        for metric in METRIC_KINDS:
            covered, total = self.counts(metric)
            if covered is not None:
                data[f"{metric.value}Covered"] = covered
            if total is not None:
                data[f"{metric.value}Total"] = total
        percent = self.coverage(kind)
        if percent is not None:
            data["coverage"] = percent
        if self.historical_coverage is not None:
            data["historicalCoverage"] = {
                "coverage": self.historical_coverage.coverage,
                "change": self.historical_coverage.change,
            }
        if self.is_directory:
            data["children"] = [child.to_dict(kind) for child in self.children]
        return data

# -----------------------------------------------------------------------------
# SUMMARIES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricTotals:
    covered: int = 0
    total: int = 0

    @property
    def percent(self) -> Optional[float]:
        return coverage_percent(self.covered, self.total)


@dataclass(frozen=True)
class CoverageSummary:
    """
    Project-wide totals for one set of coverage records.

    Attributes:
        file_count: Number of records summarized.
        metrics: Totals keyed by metric family.
    """
    file_count: int = 0
    metrics: Dict[CoverageKind, MetricTotals] = field(default_factory=dict)

    def totals(self, kind: CoverageKind) -> MetricTotals:
        return self.metrics.get(kind, MetricTotals())


Forest = List[TreeNode]
