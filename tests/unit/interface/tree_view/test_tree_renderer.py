from __future__ import annotations

"""
Unit tests for the ASCII coverage tree renderer.
"""

from covtree.core.analysis.tree_generator import generate_coverage_tree
from covtree.domain.coverage_models import FileCoverageRecord
from covtree.interface.tree_view.renderer import render_coverage_tree, save_tree_to_disk
from covtree.interface.tree_view.state import TreeViewState


def _state(records, **kwargs) -> TreeViewState:
    return TreeViewState(generate_coverage_tree(records), **kwargs)


def test_render_flat_tree() -> None:
    state = _state([
        FileCoverageRecord("src/file1.ts", 10, 20),
        FileCoverageRecord("src/file2.ts", 15, 25),
    ])

    assert render_coverage_tree(state) == [
        "└── src/  25/45 (55.6%)",
        "    ├── file1.ts  10/20 (50.0%)",
        "    └── file2.ts  15/25 (60.0%)",
    ]


def test_render_without_counts_and_undefined_coverage() -> None:
    state = _state([
        FileCoverageRecord("lib/a.ts", 4, 5),
        FileCoverageRecord("empty.ts", 0, 0),
    ])

    assert render_coverage_tree(state, show_counts=False) == [
        "├── lib/  80.0%",
        "│   └── a.ts  80.0%",
        "└── empty.ts",
    ]


def test_collapsed_directory_is_marked() -> None:
    state = _state([FileCoverageRecord("a/b/c/d.ts", 1, 1)], expand_depth=1)

    assert render_coverage_tree(state, show_counts=False) == [
        "└── a/  100.0%",
        "    └── b/ (+)  100.0%",
    ]

    state.toggle("a/b")
    assert render_coverage_tree(state, show_counts=False)[-1] == "        └── c/ (+)  100.0%"


def test_render_appends_trend() -> None:
    state = _state([FileCoverageRecord("a.ts", 3, 4)])
    state.set_historical({"a.ts": 70.0})

    assert render_coverage_tree(state) == ["└── a.ts  3/4 (75.0%)  ↑ 5.0%"]


def test_render_empty_forest() -> None:
    assert render_coverage_tree(TreeViewState()) == []


def test_save_tree_to_disk(tmp_path) -> None:
    target = tmp_path / "out" / "tree.txt"

    assert save_tree_to_disk(str(target), ["line 1", "line 2"]) is True
    assert target.read_text(encoding="utf-8") == "line 1\nline 2\n"


def test_save_tree_to_disk_failure(tmp_path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    assert save_tree_to_disk(str(blocker / "tree.txt"), ["x"]) is False
