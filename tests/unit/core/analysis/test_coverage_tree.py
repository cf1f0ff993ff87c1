from __future__ import annotations

"""
Unit tests for the coverage tree generator.

Verifies:
1. Construction, aggregation and ordering scenarios.
2. Sum and sort invariants over a realistic project.
3. Edge cases: empty input, zero totals, duplicates and collisions.
"""

from typing import List

import pytest

from covtree.core.analysis.tree_generator import (
    aggregate_tree,
    build_tree,
    generate_coverage_tree,
    locale_sort_key,
    sort_tree,
    summarize_records,
)
from covtree.domain.coverage_models import (
    CoverageKind,
    FileCoverageRecord,
    Forest,
    NodeKind,
    TreeNode,
)


def _names(nodes) -> List[str]:
    return [n.name for n in nodes]


def _all_directories(forest: Forest) -> List[TreeNode]:
    out: List[TreeNode] = []
    stack = list(forest)
    while stack:
        node = stack.pop()
        if node.is_directory:
            out.append(node)
            stack.extend(node.children)
    return out

# -----------------------------------------------------------------------------
# SCENARIOS
# -----------------------------------------------------------------------------

def test_flat_aggregation() -> None:
    forest = generate_coverage_tree([
        FileCoverageRecord("src/file1.ts", 10, 20),
        FileCoverageRecord("src/file2.ts", 15, 25),
    ])

    assert len(forest) == 1
    root = forest[0]
    assert root.kind is NodeKind.DIRECTORY
    assert root.name == "src"
    assert root.path == "src"
    assert len(root.children) == 2
    assert root.lines_covered == 25
    assert root.lines_total == 45
    assert root.coverage_percent == pytest.approx(55.555, rel=1e-3)


def test_nesting_and_directory_first_order() -> None:
    forest = generate_coverage_tree([
        FileCoverageRecord("src/file.ts", 1, 2),
        FileCoverageRecord("src/components/Button.tsx", 1, 2),
    ])

    src = forest[0]
    assert _names(src.children) == ["components", "file.ts"]
    assert src.children[0].is_directory
    assert src.children[0].path == "src/components"
    assert src.children[1].is_file


def test_zero_total_has_undefined_coverage() -> None:
    forest = generate_coverage_tree([FileCoverageRecord("file.ts", 0, 0)])

    assert len(forest) == 1
    assert forest[0].coverage_percent is None


def test_root_level_mixed_order() -> None:
    forest = generate_coverage_tree([
        FileCoverageRecord("zebra.ts", 1, 1),
        FileCoverageRecord("alpha.ts", 1, 1),
        FileCoverageRecord("components/Button.tsx", 1, 1),
    ])

    assert _names(forest) == ["components", "alpha.ts", "zebra.ts"]

# -----------------------------------------------------------------------------
# INVARIANTS
# -----------------------------------------------------------------------------

def test_sum_invariant_holds_for_every_directory(sample_records) -> None:
    forest = generate_coverage_tree(sample_records, include_tests=True)

    for directory in _all_directories(forest):
        assert directory.lines_covered == sum(c.lines_covered for c in directory.children)
        assert directory.lines_total == sum(c.lines_total for c in directory.children)


def test_sort_invariant_holds_for_every_sibling_set(sample_records) -> None:
    forest = generate_coverage_tree(sample_records, include_tests=True)

    sibling_sets = [forest] + [list(d.children) for d in _all_directories(forest)]
    for siblings in sibling_sets:
        kinds = [0 if n.is_directory else 1 for n in siblings]
        assert kinds == sorted(kinds)
        for kind in (True, False):
            names = [n.name for n in siblings if n.is_directory is kind]
            assert names == sorted(names, key=locale_sort_key)


def test_pipeline_is_idempotent_and_order_independent(sample_records) -> None:
    first = generate_coverage_tree(sample_records)
    second = generate_coverage_tree(sample_records)
    reversed_input = generate_coverage_tree(list(reversed(sample_records)))

    assert first == second
    assert first == reversed_input


def test_directory_path_uses_forward_slashes() -> None:
    forest = generate_coverage_tree([FileCoverageRecord("src\\lib\\a.ts", 1, 2)])

    lib = forest[0].children[0]
    assert lib.path == "src/lib"
    assert lib.children[0].path == "src\\lib\\a.ts"

# -----------------------------------------------------------------------------
# METRICS
# -----------------------------------------------------------------------------

def test_missing_metric_contributes_zero() -> None:
    forest = generate_coverage_tree([
        FileCoverageRecord("src/a.ts", 1, 2, statements_covered=3, statements_total=4),
        FileCoverageRecord("src/b.ts", 1, 2),
    ])

    src = forest[0]
    assert src.statements_covered == 3
    assert src.statements_total == 4
    assert src.coverage(CoverageKind.STATEMENTS) == pytest.approx(75.0)
    assert src.children[1].coverage(CoverageKind.STATEMENTS) is None


def test_directory_without_metric_has_zero_total_and_undefined_percent() -> None:
    forest = generate_coverage_tree([FileCoverageRecord("src/a.ts", 1, 2)])

    src = forest[0]
    assert src.branches_total == 0
    assert src.coverage(CoverageKind.BRANCHES) is None


def test_percent_above_100_passes_through() -> None:
    forest = generate_coverage_tree([FileCoverageRecord("src/a.ts", 30, 20)])

    assert forest[0].coverage_percent == pytest.approx(150.0)
    assert forest[0].children[0].coverage_percent == pytest.approx(150.0)


def test_file_metrics_copied_verbatim() -> None:
    record = FileCoverageRecord("a.ts", 1, 3, 2, 4, 5, 6, 7, 8)
    node = generate_coverage_tree([record])[0]

    assert node.counts(CoverageKind.LINES) == (1, 3)
    assert node.counts(CoverageKind.STATEMENTS) == (2, 4)
    assert node.counts(CoverageKind.BRANCHES) == (5, 6)
    assert node.counts(CoverageKind.FUNCTIONS) == (7, 8)
    assert node.children == ()

# -----------------------------------------------------------------------------
# EDGE CASES
# -----------------------------------------------------------------------------

def test_empty_input_yields_empty_forest() -> None:
    assert generate_coverage_tree([]) == []


def test_empty_path_record_is_dropped() -> None:
    forest = build_tree([FileCoverageRecord("", 5, 5), FileCoverageRecord("//", 1, 1)])
    assert forest == []


def test_duplicate_file_path_last_write_wins() -> None:
    forest = generate_coverage_tree([
        FileCoverageRecord("src/a.ts", 1, 10),
        FileCoverageRecord("src/a.ts", 9, 10),
    ])

    src = forest[0]
    assert len(src.children) == 1
    assert src.children[0].lines_covered == 9
    assert src.lines_covered == 9


def test_file_replaces_directory_with_same_name() -> None:
    forest = generate_coverage_tree([
        FileCoverageRecord("src/lib/a.ts", 1, 2),
        FileCoverageRecord("src/lib", 3, 4),
    ])

    lib = forest[0].children[0]
    assert lib.is_file
    assert lib.lines_total == 4


def test_directory_replaces_file_with_same_name() -> None:
    forest = generate_coverage_tree([
        FileCoverageRecord("src/lib", 3, 4),
        FileCoverageRecord("src/lib/a.ts", 1, 2),
    ])

    lib = forest[0].children[0]
    assert lib.is_directory
    assert _names(lib.children) == ["a.ts"]
    assert forest[0].lines_total == 2


def test_tests_excluded_by_default(sample_records) -> None:
    forest = generate_coverage_tree(sample_records)
    components = forest[0].children[0]

    assert _names(components.children) == ["Button.tsx", "Modal.tsx"]

    with_tests = generate_coverage_tree(sample_records, include_tests=True)
    assert "Button.test.tsx" in _names(with_tests[0].children[0].children)


def test_exclude_patterns_drop_matching_paths(sample_records) -> None:
    forest = generate_coverage_tree(sample_records, exclude_patterns=[r"^src/utils/"])

    assert _names(forest[0].children) == ["components", "index.ts"]

# -----------------------------------------------------------------------------
# STAGES AND HELPERS
# -----------------------------------------------------------------------------

def test_stages_compose_like_pipeline(sample_records) -> None:
    staged = sort_tree(aggregate_tree(build_tree(sample_records)))
    assert staged == generate_coverage_tree(sample_records, include_tests=True)


def test_build_tree_leaves_directories_unaggregated() -> None:
    forest = build_tree([FileCoverageRecord("src/a.ts", 1, 2)])
    assert forest[0].lines_total is None
    assert forest[0].coverage_percent is None


def test_locale_sort_key_orders_case_and_accents() -> None:
    names = ["b.ts", "B.ts", "a.ts", "Á.ts", "c.ts"]
    assert sorted(names, key=locale_sort_key) == ["a.ts", "Á.ts", "b.ts", "B.ts", "c.ts"]


def test_locale_sort_key_orders_punctuation_before_digits_and_letters() -> None:
    names = ["ab", "a1", "a.b", "a-b", "a_b", "a b", "a~b"]
    assert sorted(names, key=locale_sort_key) == ["a b", "a_b", "a-b", "a.b", "a~b", "a1", "ab"]


def test_sibling_files_with_separators_follow_collation_order() -> None:
    forest = generate_coverage_tree([
        FileCoverageRecord("src/file-b.ts", 1, 1),
        FileCoverageRecord("src/file_b.ts", 1, 1),
        FileCoverageRecord("src/file2.ts", 1, 1),
    ])
    assert [c.name for c in forest[0].children] == ["file_b.ts", "file-b.ts", "file2.ts"]


def test_to_dict_uses_external_keys() -> None:
    forest = generate_coverage_tree([FileCoverageRecord("src/a.ts", 1, 2)])
    data = forest[0].to_dict()

    assert data["type"] == "directory"
    assert data["linesCovered"] == 1
    assert data["coverage"] == pytest.approx(50.0)
    assert data["children"][0]["type"] == "file"
    assert "children" not in data["children"][0]


def test_summarize_records(sample_records) -> None:
    summary = summarize_records(sample_records)

    assert summary.file_count == 6
    lines = summary.totals(CoverageKind.LINES)
    assert (lines.covered, lines.total) == (95, 119)
    statements = summary.totals(CoverageKind.STATEMENTS)
    assert (statements.covered, statements.total) == (17, 29)
    assert summary.totals(CoverageKind.BRANCHES).percent is None
