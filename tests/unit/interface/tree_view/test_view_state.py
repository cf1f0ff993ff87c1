from __future__ import annotations

"""
Unit tests for the interactive tree view state.

Verifies:
1. Default expansion depth and per-directory toggling.
2. Expansion persistence across forest rebuilds.
3. Statement toggle, historical overlay and navigation of file rows.
"""

from unittest.mock import MagicMock

import pytest

from covtree.core.analysis.tree_generator import generate_coverage_tree
from covtree.domain.coverage_models import CoverageKind, FileCoverageRecord
from covtree.interface.tree_view.state import TreeViewState

RECORDS = [
    FileCoverageRecord("src/components/forms/Input.tsx", 4, 10, 5, 10),
    FileCoverageRecord("src/components/Button.tsx", 9, 10, 10, 10),
    FileCoverageRecord("src/index.ts", 1, 2),
    FileCoverageRecord("README.md", 0, 0),
]


@pytest.fixture
def forest():
    return generate_coverage_tree(RECORDS)


@pytest.fixture
def navigator() -> MagicMock:
    return MagicMock()


@pytest.fixture
def state(forest, navigator) -> TreeViewState:
    return TreeViewState(forest, navigator=navigator)


def _paths(state: TreeViewState):
    return [row.node.path for row in state.visible_rows()]


def test_default_depth_expands_two_levels(state) -> None:
    assert _paths(state) == [
        "src",
        "src/components",
        "src/components/forms",
        "src/components/Button.tsx",
        "src/index.ts",
        "README.md",
    ]
    rows = state.visible_rows()
    assert rows[2].expandable and not rows[2].expanded
    assert rows[2].depth == 2


def test_zero_depth_starts_collapsed(forest) -> None:
    state = TreeViewState(forest, expand_depth=0)
    assert _paths(state) == ["src", "README.md"]


def test_toggle_only_affects_one_directory(state) -> None:
    assert state.toggle("src/components/forms") is True
    assert "src/components/forms/Input.tsx" in _paths(state)

    assert state.toggle("src") is False
    assert _paths(state) == ["src", "README.md"]

    # Re-expanding restores the previous descendant states
    assert state.toggle("src") is True
    assert "src/components/forms/Input.tsx" in _paths(state)


def test_toggle_ignores_files_and_unknown_paths(state) -> None:
    assert state.toggle("src/index.ts") is None
    assert state.toggle("nope") is None


def test_expand_and_collapse_all(state) -> None:
    state.expand_all()
    assert len(state.visible_rows()) == 7

    state.collapse_all()
    assert _paths(state) == ["src", "README.md"]


def test_expansion_survives_rebuild(state) -> None:
    state.toggle("src/components")
    rebuilt = generate_coverage_tree(RECORDS + [FileCoverageRecord("src/components/New.tsx", 1, 1)])

    state.set_forest(rebuilt)

    assert not state.is_expanded("src/components")
    assert "src/components/New.tsx" not in _paths(state)


def test_rows_carry_badges(state) -> None:
    rows = {row.node.path: row for row in state.visible_rows()}

    assert rows["src/components/Button.tsx"].coverage.variant == "success"
    assert rows["src/index.ts"].coverage.percent_label == "50.0%"
    assert rows["README.md"].coverage is None
    assert rows["README.md"].expandable is False


def test_statement_toggle_switches_badges(state) -> None:
    assert state.toggle_statement_coverage() is CoverageKind.STATEMENTS
    assert state.use_statement_coverage

    rows = {row.node.path: row for row in state.visible_rows()}
    assert rows["src/components"].coverage.count_label == "15/20"
    assert rows["src/index.ts"].coverage is None

    assert state.toggle_statement_coverage() is CoverageKind.LINES


def test_historical_overlay_adds_trends(state) -> None:
    state.set_historical({"src/index.ts": 40.0, "src/components/Button.tsx": 95.0})
    rows = {row.node.path: row for row in state.visible_rows()}

    assert state.has_historical
    assert rows["src/index.ts"].trend.arrow == "↑"
    assert rows["src/components/Button.tsx"].trend.arrow == "↓"
    assert rows["README.md"].trend is None

    state.set_historical(None)
    assert all(row.trend is None for row in state.visible_rows())


def test_selecting_file_navigates(state, navigator) -> None:
    route = state.select("src/index.ts")

    assert route == "/coverage/src/index.ts"
    navigator.assert_called_once_with("/coverage/src/index.ts")


def test_selecting_directory_never_navigates(state, navigator) -> None:
    assert state.select("src/components") is None
    navigator.assert_not_called()


def test_file_count_and_lookup(state) -> None:
    state.set_historical({"src/index.ts": 40.0})

    assert state.file_count == 4
    node = state.find_node("src/index.ts")
    assert node.historical_coverage.coverage == 40.0
    assert state.find_node("missing.ts") is None


def test_empty_state_has_no_rows() -> None:
    state = TreeViewState()
    assert state.visible_rows() == []
    assert state.file_count == 0
