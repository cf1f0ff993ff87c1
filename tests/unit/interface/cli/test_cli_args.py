from __future__ import annotations

"""
Unit tests for CLI argument parsing and override mapping.
"""

import pytest

from covtree.interface.cli.args import args_to_overrides, build_parser


def _overrides(argv):
    return args_to_overrides(build_parser().parse_args(argv))


def test_no_arguments_produce_no_overrides() -> None:
    assert _overrides([]) == {}


def test_source_options() -> None:
    overrides = _overrides(["-i", "cov.json", "--history", "runs.json", "--compare", "1m"])

    assert overrides == {
        "input_path": "cov.json",
        "history_path": "runs.json",
        "compare_period": "1m",
    }


def test_invalid_compare_period_exits() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--compare", "2w"])


def test_rollup_and_presentation_flags() -> None:
    overrides = _overrides([
        "--statements", "--include-tests", "--exclude", r"^dist/, \.d\.ts$",
        "--depth", "3", "--no-counts", "--save", "tree.txt",
    ])

    assert overrides == {
        "coverage_kind": "statements",
        "include_tests": True,
        "exclude_patterns": ["^dist/", r"\.d\.ts$"],
        "expand_depth": 3,
        "show_counts": False,
        "save_path": "tree.txt",
    }


def test_output_flags_are_not_config_overrides() -> None:
    args = build_parser().parse_args(["--json", "--expand-all", "--dump-config", "--debug", "--use-defaults"])

    assert args.json_output and args.expand_all and args.dump_config
    assert args.debug and args.use_defaults
    assert args_to_overrides(args) == {}
