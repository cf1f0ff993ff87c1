from __future__ import annotations

"""
Core orchestration pipeline.

Coordinates one coverage tree build:
1. Validates configuration.
2. Loads the current report and the run history (local files or URLs) in
   parallel threads.
3. Selects the historical run for the comparison period.
4. Builds, aggregates and sorts the tree and summarizes the included records.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from covtree.core.analysis.historical import historical_coverage_map, select_historical_run
from covtree.core.analysis.tree_generator import (
    aggregate_tree,
    build_tree,
    sort_tree,
    summarize_records,
)
from covtree.core.pipeline.components.filters import filter_records
from covtree.core.pipeline.stages.validator import validate_config
from covtree.core.services.loader import CoverageDataError, load_records, load_runs
from covtree.domain.coverage_models import CoverageKind, CoverageRun, FileCoverageRecord
from covtree.domain.pipeline_models import (
    CoverageResult,
    CoverageSources,
    create_error_result,
    create_success_result,
)
from covtree.infra.fs import is_remote_location
from covtree.infra.network import fetch_coverage_records, fetch_coverage_runs

logger = logging.getLogger(__name__)


def run_pipeline(
        config: Optional[Dict[str, Any]],
        *,
        reference_ms: Optional[int] = None,
) -> CoverageResult:
    """
    Execute the full coverage tree pipeline.

    Args:
        config: Configuration dictionary (raw or partial).
        reference_ms: Time the comparison period is measured from. Defaults
            to the latest history run when no report is given, else now.

    Returns:
        CoverageResult: Status, tree and comparison data.
    """
    logger.info("Pipeline execution started.")

    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    try:
        sources = load_sources(cfg, reference_ms=reference_ms)
    except CoverageDataError as e:
        logger.error(str(e))
        return create_error_result(str(e), cfg)

    included = filter_records(
        sources.records,
        include_tests=cfg["include_tests"],
        exclude_patterns=cfg["exclude_patterns"],
    )
    forest = sort_tree(aggregate_tree(build_tree(included)))
    summary = summarize_records(included)

    logger.info(
        f"Pipeline finished: {summary.file_count} files in tree "
        f"({len(sources.records)} loaded, {len(forest)} top-level nodes)."
    )
    return create_success_result(cfg, sources, forest, summary)


def load_sources(cfg: Dict[str, Any], *, reference_ms: Optional[int] = None) -> CoverageSources:
    """
    Load the current records and the matching historical coverage.

    When no report location is configured, the latest history run is used
    as the current report and as the comparison reference.

    Args:
        cfg: Validated configuration.
        reference_ms: Explicit comparison reference time (epoch ms).

    Returns:
        CoverageSources: Loaded inputs.

    Raises:
        CoverageDataError: If no source is configured or a source fails.
    """
    input_path = cfg.get("input_path", "")
    history_path = cfg.get("history_path", "")
    period = cfg.get("compare_period", "")

    if not input_path and not history_path:
        raise CoverageDataError("No coverage input configured.")

    records: Optional[List[FileCoverageRecord]] = None
    runs: List[CoverageRun] = []

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="CoverageLoader") as executor:
        future_records = executor.submit(read_records, input_path) if input_path else None
        future_runs = executor.submit(read_runs, history_path) if history_path else None

        if future_records is not None:
            records = future_records.result()
        if future_runs is not None:
            runs = future_runs.result()

    if records is None:
        if not runs:
            raise CoverageDataError(f"History '{history_path}' contains no runs.")
        latest = runs[-1]
        records = list(latest.records)
        if reference_ms is None:
            reference_ms = latest.started_at
        logger.info(f"Using latest history run ({latest.started_at}) as current report.")

    if reference_ms is None:
        reference_ms = int(time.time() * 1000)

    if not period:
        return CoverageSources(records=records, reference_ms=reference_ms)
    if not runs:
        logger.warning(f"Comparison '{period}' requested without a history source. Skipping overlay.")
        return CoverageSources(records=records, reference_ms=reference_ms)

    kind = CoverageKind(cfg.get("coverage_kind", "lines"))
    run = select_historical_run(runs, reference_ms, period)
    if run is None:
        return CoverageSources(records=records, reference_ms=reference_ms)

    return CoverageSources(
        records=records,
        historical=historical_coverage_map(run.records, kind),
        historical_started_at=run.started_at,
        reference_ms=reference_ms,
    )


def read_records(location: str) -> List[FileCoverageRecord]:
    """Load a report from a local file or an http(s) URL."""
    if is_remote_location(location):
        records = fetch_coverage_records(location)
        if records is None:
            raise CoverageDataError(f"Cannot fetch coverage report from '{location}'.")
        return records
    return load_records(location)


def read_runs(location: str) -> List[CoverageRun]:
    """Load a run history from a local file or an http(s) URL."""
    if is_remote_location(location):
        runs = fetch_coverage_runs(location)
        if runs is None:
            raise CoverageDataError(f"Cannot fetch coverage history from '{location}'.")
        return runs
    return load_runs(location)


def source_exists(location: str) -> bool:
    """Pre-flight check: URLs are assumed reachable, files must exist."""
    return is_remote_location(location) or os.path.isfile(location)
