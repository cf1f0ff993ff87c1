from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Declares the command-line schema of the coverage tree tool and translates
parsed namespaces into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from covtree.domain.constants import HISTORICAL_PERIODS
from covtree.utils.i18n import i18n

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the covtree CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="covtree",
        description=i18n.t("app.description"),
    )

    # --- Sources ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help=i18n.t("cli.args.input"),
    )
    p.add_argument(
        "--history",
        dest="history_path",
        default=None,
        help=i18n.t("cli.args.history"),
    )
    p.add_argument(
        "--compare",
        dest="compare_period",
        choices=sorted(HISTORICAL_PERIODS),
        default=None,
        help=i18n.t("cli.args.compare"),
    )

    # --- Rollup ---
    p.add_argument(
        "--statements",
        action="store_true",
        help=i18n.t("cli.args.statements"),
    )
    p.add_argument(
        "--include-tests",
        action="store_true",
        help=i18n.t("cli.args.include_tests"),
    )
    p.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help=i18n.t("cli.args.exclude"),
    )

    # --- Presentation ---
    p.add_argument(
        "--depth",
        dest="expand_depth",
        type=int,
        default=None,
        help=i18n.t("cli.args.depth"),
    )
    p.add_argument(
        "--expand-all",
        action="store_true",
        help=i18n.t("cli.args.expand_all"),
    )
    p.add_argument(
        "--no-counts",
        action="store_true",
        help=i18n.t("cli.args.no_counts"),
    )
    p.add_argument(
        "--save",
        dest="save_path",
        default=None,
        help=i18n.t("cli.args.save"),
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help=i18n.t("cli.args.json"),
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help=i18n.t("cli.args.defaults"),
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help=i18n.t("cli.args.dump"),
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help=i18n.t("cli.args.debug"),
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options the user actually passed appear in the result.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    for key in ("input_path", "history_path", "compare_period", "expand_depth", "save_path"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value

    if args.statements:
        overrides["coverage_kind"] = "statements"
    if args.include_tests:
        overrides["include_tests"] = True
    if args.exclude_patterns:
        overrides["exclude_patterns"] = _split_csv(args.exclude_patterns)
    if args.no_counts:
        overrides["show_counts"] = False

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of stripped items."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
