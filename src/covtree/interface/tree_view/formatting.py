from __future__ import annotations

"""
Coverage Presentation Helpers.

Pure formatting rules shared by every tree consumer (CLI renderer and GUI):
coverage badge display, progress bar clamping, historical trend indicators
and the navigation target of a file row.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from covtree.domain.constants import FILE_DETAIL_ROUTE, SUCCESS_THRESHOLD, WARNING_THRESHOLD
from covtree.domain.coverage_models import CoverageKind, HistoricalCoverage, TreeNode

# -----------------------------------------------------------------------------
# VIEW MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CoverageDisplay:
    """
    Badge and bar data for one node and one metric family.

    Attributes:
        covered: Covered units (0 when unreported).
        total: Total units, always > 0.
        percent: Unclamped coverage percentage.
        variant: 'success', 'warning' or 'error'.
        bar_width: Percentage clamped to [0, 100] for progress bars.
    """
    covered: int
    total: int
    percent: float
    variant: str
    bar_width: float

    @property
    def count_label(self) -> str:
        return f"{self.covered}/{self.total}"

    @property
    def percent_label(self) -> str:
        return f"{self.percent:.1f}%"


@dataclass(frozen=True)
class TrendIndicator:
    """Arrow, label and tooltip for a historical delta."""
    arrow: str
    label: str
    tooltip: str

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def coverage_variant(percent: float) -> str:
    """Map a coverage percentage to its badge variant."""
    if percent >= SUCCESS_THRESHOLD:
        return "success"
    if percent >= WARNING_THRESHOLD:
        return "warning"
    return "error"


def clamp_bar_width(percent: float) -> float:
    """Clamp a percentage to the visual range of a progress bar."""
    return max(0.0, min(100.0, percent))


def coverage_display(node: TreeNode, kind: CoverageKind = CoverageKind.LINES) -> Optional[CoverageDisplay]:
    """
    Build the coverage badge for a node, if the metric has data.

    Args:
        node: Tree node to read.
        kind: Metric family selected by the global toggle.

    Returns:
        Optional[CoverageDisplay]: None when the total is absent or zero.
    """
    covered, total = node.counts(kind)
    if total is None or total <= 0:
        return None

    percent = node.coverage(kind)
    if percent is None:
        return None

    return CoverageDisplay(
        covered=covered or 0,
        total=total,
        percent=percent,
        variant=coverage_variant(percent),
        bar_width=clamp_bar_width(percent),
    )


def trend_indicator(historical: Optional[HistoricalCoverage]) -> Optional[TrendIndicator]:
    """
    Format a historical delta as an arrow indicator.

    Args:
        historical: Overlay attached to the node.

    Returns:
        Optional[TrendIndicator]: None when no overlay is attached.
    """
    if historical is None:
        return None

    change = historical.change
    if change > 0:
        arrow = "↑"
    elif change < 0:
        arrow = "↓"
    else:
        arrow = "→"

    sign = "+" if change > 0 else ""
    return TrendIndicator(
        arrow=arrow,
        label=f"{arrow} {abs(change):.1f}%",
        tooltip=f"{sign}{change:.1f}% vs historical",
    )


def navigation_target(path: str) -> str:
    """
    Build the file-detail route for a file path.

    Every unsafe character is percent-encoded; path separators are kept.

    Args:
        path: File path of the node.

    Returns:
        str: Route such as '/coverage/src/file%20with%20spaces.ts'.
    """
    return FILE_DETAIL_ROUTE + quote(path, safe="/")
