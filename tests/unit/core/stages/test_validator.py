from __future__ import annotations

"""
Unit tests for the configuration validator.

Verifies:
1. Default filling and normalization of a partial configuration.
2. Lenient coercion (with warnings) outside strict mode.
3. Exceptions raised in strict mode.
"""

import os

import pytest

from covtree.core.pipeline.stages.validator import validate_config


def test_empty_config_yields_defaults(mock_config_dict) -> None:
    cfg, warnings = validate_config({})

    assert cfg == mock_config_dict
    assert warnings == []


def test_non_dict_falls_back_to_defaults(mock_config_dict) -> None:
    cfg, warnings = validate_config(["not", "a", "dict"])

    assert cfg == mock_config_dict
    assert len(warnings) == 1


def test_non_dict_strict_raises() -> None:
    with pytest.raises(TypeError):
        validate_config(None, strict=True)


def test_paths_are_normalized_and_urls_kept(tmp_path) -> None:
    cfg, _ = validate_config({
        "input_path": f"  {tmp_path}/report.json  ",
        "history_path": "https://ci.example.com/history.json",
    })

    assert cfg["input_path"] == os.path.abspath(str(tmp_path / "report.json"))
    assert cfg["history_path"] == "https://ci.example.com/history.json"
    assert cfg["save_path"] == ""


def test_wrong_path_type_falls_back() -> None:
    cfg, warnings = validate_config({"input_path": 123})

    assert cfg["input_path"] == ""
    assert any("input_path" in w for w in warnings)


@pytest.mark.parametrize("raw, expected", [
    ("yes", True), ("ON", True), ("1", True), (1, True),
    ("no", False), ("off", False), (0, False),
])
def test_bool_spellings_are_coerced(raw, expected) -> None:
    cfg, warnings = validate_config({"include_tests": raw})

    assert cfg["include_tests"] is expected
    assert warnings


def test_bool_strict_rejects_strings() -> None:
    with pytest.raises(TypeError):
        validate_config({"show_counts": "yes"}, strict=True)


def test_choices_are_case_insensitive() -> None:
    cfg, warnings = validate_config({"compare_period": " 1W ", "coverage_kind": "Statements"})

    assert cfg["compare_period"] == "1w"
    assert cfg["coverage_kind"] == "statements"
    assert warnings == []


def test_invalid_choice_falls_back() -> None:
    cfg, warnings = validate_config({"compare_period": "2y", "coverage_kind": "branches"})

    assert cfg["compare_period"] == ""
    assert cfg["coverage_kind"] == "lines"
    assert len(warnings) == 2


def test_invalid_choice_strict_raises() -> None:
    with pytest.raises(ValueError):
        validate_config({"compare_period": "2y"}, strict=True)
    with pytest.raises(TypeError):
        validate_config({"coverage_kind": 3}, strict=True)


def test_expand_depth_coercion() -> None:
    assert validate_config({"expand_depth": "4"})[0]["expand_depth"] == 4
    assert validate_config({"expand_depth": -1})[0]["expand_depth"] == 2
    assert validate_config({"expand_depth": True})[0]["expand_depth"] == 2
    assert validate_config({"expand_depth": 0})[0]["expand_depth"] == 0


def test_expand_depth_strict() -> None:
    with pytest.raises(ValueError):
        validate_config({"expand_depth": -3}, strict=True)
    with pytest.raises(TypeError):
        validate_config({"expand_depth": "3"}, strict=True)


def test_exclude_patterns_from_csv() -> None:
    cfg, warnings = validate_config({"exclude_patterns": r"^dist/, \.d\.ts$ ,"})

    assert cfg["exclude_patterns"] == ["^dist/", r"\.d\.ts$"]
    assert warnings


def test_exclude_patterns_drop_invalid_items() -> None:
    cfg, warnings = validate_config({"exclude_patterns": ["^src/", 5, "([bad", "  "]})

    assert cfg["exclude_patterns"] == ["^src/"]
    assert len(warnings) == 2


def test_exclude_patterns_strict_rejects_bad_regex() -> None:
    with pytest.raises(ValueError):
        validate_config({"exclude_patterns": ["([bad"]}, strict=True)


def test_unknown_keys_are_preserved() -> None:
    cfg, _ = validate_config({"custom_flag": 1})
    assert cfg["custom_flag"] == 1
