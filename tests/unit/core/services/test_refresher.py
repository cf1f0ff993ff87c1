from __future__ import annotations

"""
Unit tests for the last-request-wins refresh coordinator.
"""

from unittest.mock import MagicMock

import pytest

from covtree.core.services.refresh import CoverageRefresher
from covtree.domain.coverage_models import FileCoverageRecord

OLD = [FileCoverageRecord("src/old.ts", 1, 2)]
NEW = [FileCoverageRecord("src/new.ts", 2, 2)]


@pytest.fixture
def on_tree() -> MagicMock:
    return MagicMock()


@pytest.fixture
def on_error() -> MagicMock:
    return MagicMock()


@pytest.fixture
def refresher(on_tree, on_error) -> CoverageRefresher:
    return CoverageRefresher(on_tree=on_tree, on_error=on_error)


def _published_names(on_tree: MagicMock):
    forest, _historical = on_tree.call_args[0]
    return [child.name for child in forest[0].children]


def test_tokens_increase(refresher) -> None:
    first = refresher.begin_request()
    second = refresher.begin_request()

    assert second > first
    assert refresher.latest_token == second
    assert refresher.is_current(second)
    assert not refresher.is_current(first)


def test_single_request_is_published(refresher, on_tree) -> None:
    token = refresher.begin_request()

    assert refresher.complete(token, OLD, {"src/old.ts": 10.0}) is True
    on_tree.assert_called_once()
    forest, historical = on_tree.call_args[0]
    assert forest[0].name == "src"
    assert historical == {"src/old.ts": 10.0}


def test_out_of_order_completion_keeps_newest(refresher, on_tree) -> None:
    first = refresher.begin_request()
    second = refresher.begin_request()

    assert refresher.complete(second, NEW) is True
    assert refresher.complete(first, OLD) is False

    on_tree.assert_called_once()
    assert _published_names(on_tree) == ["new.ts"]


def test_stale_completion_before_newest_is_discarded(refresher, on_tree) -> None:
    first = refresher.begin_request()
    second = refresher.begin_request()

    assert refresher.complete(first, OLD) is False
    on_tree.assert_not_called()

    refresher.complete(second, NEW)
    assert _published_names(on_tree) == ["new.ts"]


def test_token_is_published_once(refresher, on_tree) -> None:
    token = refresher.begin_request()
    refresher.complete(token, NEW)

    assert refresher.complete(token, NEW) is False
    on_tree.assert_called_once()


def test_missing_historical_is_passed_as_none(refresher, on_tree) -> None:
    refresher.complete(refresher.begin_request(), NEW)
    assert on_tree.call_args[0][1] is None


def test_failure_of_latest_request_is_reported(refresher, on_error) -> None:
    token = refresher.begin_request()
    error = RuntimeError("network down")

    assert refresher.fail(token, error) is True
    on_error.assert_called_once_with(error)


def test_failure_of_stale_request_is_ignored(refresher, on_error) -> None:
    stale = refresher.begin_request()
    refresher.begin_request()

    assert refresher.fail(stale, RuntimeError("late")) is False
    on_error.assert_not_called()


def test_build_is_memoized_for_identical_input(refresher) -> None:
    first = refresher.build(NEW)
    second = refresher.build(list(NEW))

    assert first == second
    assert first is not second


def test_build_reruns_when_filters_change(refresher) -> None:
    records = NEW + [FileCoverageRecord("src/new.test.ts", 1, 1)]
    assert len(refresher.build(records)[0].children) == 1
    assert len(refresher.build(records, include_tests=True)[0].children) == 2

    excluded = refresher.build(records, include_tests=True, exclude_patterns=[r"\.test\."])
    assert len(excluded[0].children) == 1


def test_build_defaults_come_from_construction(on_tree) -> None:
    records = NEW + [FileCoverageRecord("src/new.test.ts", 1, 1)]
    refresher = CoverageRefresher(on_tree=on_tree, include_tests=True, exclude_patterns=[r"^src/new\.ts$"])

    assert [c.name for c in refresher.build(records)[0].children] == ["new.test.ts"]
    assert len(refresher.build(records, exclude_patterns=[])[0].children) == 2


def test_complete_applies_filters_of_the_request(refresher, on_tree) -> None:
    records = NEW + [FileCoverageRecord("src/new.test.ts", 1, 1)]

    refresher.complete(refresher.begin_request(), records, include_tests=True)
    assert _published_names(on_tree) == ["new.test.ts", "new.ts"]

    refresher.complete(refresher.begin_request(), records)
    assert _published_names(on_tree) == ["new.ts"]
