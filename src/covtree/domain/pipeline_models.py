from __future__ import annotations

"""
Pipeline Domain Data Models.

Result structures exchanged between the coverage pipeline engine and the
interface layers (CLI/GUI).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from covtree.domain.coverage_models import CoverageSummary, FileCoverageRecord, Forest

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CoverageSources:
    """
    Raw inputs gathered for one tree build.

    Attributes:
        records: Current per-file records.
        historical: Previous-period path -> percent map, None without comparison.
        historical_started_at: Start time (epoch ms) of the compared run.
        reference_ms: Time the comparison period was measured from.
    """
    records: List[FileCoverageRecord] = field(default_factory=list)
    historical: Optional[Dict[str, float]] = None
    historical_started_at: Optional[int] = None
    reference_ms: Optional[int] = None


@dataclass(frozen=True)
class CoverageResult:
    """
    Outcome of a complete pipeline execution.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        input_path: Location of the current coverage document.
        history_path: Location of the run history document.
        compare_period: Comparison period key ('' when disabled).
        coverage_kind: Metric family shown ('lines' or 'statements').
        forest: Aggregated and sorted tree (without overlay).
        historical: Previous-period coverage map, if a run matched.
        historical_started_at: Start time of the matched run.
        summary: Totals over the records included in the tree.
        record_count: Number of records loaded before filtering.
    """
    ok: bool
    error: str

    input_path: str
    history_path: str
    compare_period: str
    coverage_kind: str

    forest: Forest = field(default_factory=list)
    historical: Optional[Dict[str, float]] = None
    historical_started_at: Optional[int] = None
    summary: Optional[CoverageSummary] = None
    record_count: int = 0

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(error: str, cfg: Dict[str, Any]) -> CoverageResult:
    """Build a failed result carrying the configuration that produced it."""
    return CoverageResult(
        ok=False,
        error=error,
        input_path=cfg.get("input_path", ""),
        history_path=cfg.get("history_path", ""),
        compare_period=cfg.get("compare_period", ""),
        coverage_kind=cfg.get("coverage_kind", "lines"),
    )


def create_success_result(
        cfg: Dict[str, Any],
        sources: CoverageSources,
        forest: Forest,
        summary: CoverageSummary,
) -> CoverageResult:
    """
    Build a successful result.

    Args:
        cfg: Validated configuration used for the run.
        sources: Loaded inputs.
        forest: Built tree.
        summary: Totals of the included records.

    Returns:
        CoverageResult: An immutable success result.
    """
    return CoverageResult(
        ok=True,
        error="",
        input_path=cfg.get("input_path", ""),
        history_path=cfg.get("history_path", ""),
        compare_period=cfg.get("compare_period", ""),
        coverage_kind=cfg.get("coverage_kind", "lines"),
        forest=forest,
        historical=sources.historical,
        historical_started_at=sources.historical_started_at,
        summary=summary,
        record_count=len(sources.records),
    )
