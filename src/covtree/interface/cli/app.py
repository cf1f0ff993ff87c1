from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merge
(defaults or persisted session, then CLI overrides), source pre-flight,
pipeline execution and rendering of the coverage tree as ASCII or JSON.
"""

import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from covtree.core.pipeline.engine import run_pipeline, source_exists
from covtree.core.pipeline.stages.validator import validate_config
from covtree.domain.config import get_default_config, load_config
from covtree.domain.coverage_models import METRIC_KINDS, CoverageKind, CoverageSummary
from covtree.domain.pipeline_models import CoverageResult
from covtree.infra.logging import LoggingConfig, configure_logging, get_logger
from covtree.interface.cli import args as cli_args
from covtree.interface.tree_view.renderer import render_coverage_tree, save_tree_to_disk
from covtree.interface.tree_view.state import TreeViewState
from covtree.utils.i18n import i18n

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on pipeline failure, 2 on missing input,
             130 when interrupted.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "WARNING"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=None))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))

    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # Pre-flight source verification
    sources = [clean_conf["input_path"], clean_conf["history_path"]]
    if not any(sources):
        msg = i18n.t("cli.errors.no_input")
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2
    for location in sources:
        if location and not source_exists(location):
            msg = i18n.t("cli.errors.path_not_exist", path=location)
            logger.error(msg)
            print(f"ERROR: {msg}", file=sys.stderr)
            return 2

    try:
        result = run_pipeline(clean_conf)
    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return 130
    except Exception as e:
        msg = i18n.t("cli.errors.pipeline_fail", error=str(e))
        logger.critical(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 1

    if not result.ok:
        print(f"ERROR: {i18n.t('cli.errors.pipeline_fail', error=result.error)}", file=sys.stderr)
        return 1

    state = build_view_state(result, clean_conf, expand_all=bool(args.expand_all))

    if args.json_output:
        print(json.dumps([node.to_dict(state.coverage_kind) for node in state.forest], ensure_ascii=False, indent=2))
    else:
        lines = render_coverage_tree(state, show_counts=clean_conf["show_counts"])
        _print_human_report(result, lines)

    save_path = clean_conf["save_path"]
    if save_path:
        lines = render_coverage_tree(state, show_counts=clean_conf["show_counts"])
        if not save_tree_to_disk(save_path, lines):
            print(f"ERROR: {i18n.t('cli.errors.save_fail', path=save_path)}", file=sys.stderr)
            return 1

    return 0


def build_view_state(
        result: CoverageResult,
        config: Dict[str, Any],
        expand_all: bool = False,
) -> TreeViewState:
    """Bind a pipeline result to a tree view state configured for output."""
    state = TreeViewState(
        forest=result.forest,
        coverage_kind=CoverageKind(config["coverage_kind"]),
        expand_depth=config["expand_depth"],
    )
    state.set_historical(result.historical)
    if expand_all:
        state.expand_all()
    return state

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge known override keys into the base configuration.

    Args:
        base: Base configuration.
        overrides: Values to inject; None values are ignored.

    Returns:
        Dict[str, Any]: Merged configuration.
    """
    out = dict(base)
    for k in get_default_config():
        if overrides.get(k) is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_report(result: CoverageResult, lines: List[str]) -> None:
    """Print the tree followed by the coverage summary."""
    source = result.input_path or result.history_path
    print(i18n.t("cli.status.report", path=source))

    if lines:
        for line in lines:
            print(line)
    else:
        print(i18n.t("cli.status.empty"))

    if result.summary is not None:
        print()
        _print_summary(result.summary)

    if result.compare_period:
        if result.historical_started_at is not None:
            stamp = datetime.fromtimestamp(result.historical_started_at / 1000, tz=timezone.utc)
            print(i18n.t(
                "cli.status.compared",
                period=result.compare_period,
                date=stamp.strftime("%Y-%m-%d %H:%M UTC"),
            ))
        else:
            print(i18n.t("cli.status.no_history", period=result.compare_period))


def _print_summary(summary: CoverageSummary) -> None:
    print(i18n.t("cli.status.files", count=summary.file_count))
    for kind in METRIC_KINDS:
        totals = summary.totals(kind)
        if totals.percent is None:
            continue
        label = i18n.t(f"cli.metrics.{kind.value}")
        print(f"  {label}: {totals.covered}/{totals.total} ({totals.percent:.1f}%)")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
