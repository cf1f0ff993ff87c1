from __future__ import annotations

"""
Coverage Refresh Coordinator.

Bridges asynchronous record fetches and the pure tree pipeline. Every fetch
is tagged with a monotonically increasing request token; only the result of
the most recent request is ever published (last-request-wins), so fetches
resolving out of order cannot overwrite newer data. Rebuilding is a full,
memoized pipeline run; there is no incremental patching.
"""

import logging
import threading
from typing import Callable, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

from covtree.core.analysis.tree_generator import generate_coverage_tree
from covtree.domain.coverage_models import FileCoverageRecord, Forest

logger = logging.getLogger(__name__)


class CoverageRefresher:
    """
    Applies the newest fetch result to a consumer callback.

    Thread-safe: fetch workers may call complete()/fail() from any thread.
    Filter settings travel with each request; the construction defaults are
    never modified afterwards.
    """

    def __init__(
            self,
            on_tree: Callable[[Forest, Optional[Dict[str, float]]], None],
            on_error: Optional[Callable[[Exception], None]] = None,
            include_tests: bool = False,
            exclude_patterns: Optional[List[str]] = None,
    ) -> None:
        """
        Args:
            on_tree: Receives every published forest with its historical map.
            on_error: Receives the failure of the latest request, if any.
            include_tests: Default for keeping test suites in the rollup.
            exclude_patterns: Default regexes of record paths to leave out.
        """
        self._on_tree = on_tree
        self._on_error = on_error
        self._include_tests = include_tests
        self._exclude_patterns: Tuple[str, ...] = tuple(exclude_patterns or ())

        self._lock = threading.Lock()
        self._latest_token = 0
        self._applied_token = 0

        self._memo_key: Optional[Hashable] = None
        self._memo_forest: Forest = []

    @property
    def latest_token(self) -> int:
        with self._lock:
            return self._latest_token

    def begin_request(self) -> int:
        """Register a new fetch and return its token."""
        with self._lock:
            self._latest_token += 1
            token = self._latest_token
        logger.debug(f"Refresh: request #{token} started.")
        return token

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest_token

    def complete(
            self,
            token: int,
            records: Sequence[FileCoverageRecord],
            historical: Optional[Mapping[str, float]] = None,
            *,
            include_tests: Optional[bool] = None,
            exclude_patterns: Optional[Sequence[str]] = None,
    ) -> bool:
        """
        Publish the tree built from a fetch result if it is still current.

        Args:
            token: Token returned by begin_request().
            records: Records delivered by the fetch.
            historical: Previous-period coverage fetched alongside, if any.
            include_tests: Filter setting captured with the request.
            exclude_patterns: Exclusion regexes captured with the request.

        Returns:
            bool: True if the forest was published, False if discarded.
        """
        if not self.is_current(token):
            logger.debug(f"Refresh: discarding stale result #{token}.")
            return False

        forest = self.build(records, include_tests=include_tests, exclude_patterns=exclude_patterns)

        with self._lock:
            if token != self._latest_token or token <= self._applied_token:
                logger.debug(f"Refresh: result #{token} superseded during build.")
                return False
            self._applied_token = token

        self._on_tree(forest, dict(historical) if historical is not None else None)
        logger.debug(f"Refresh: result #{token} published ({len(forest)} top-level nodes).")
        return True

    def fail(self, token: int, error: Exception) -> bool:
        """Report a fetch failure when it belongs to the latest request."""
        if not self.is_current(token):
            return False
        logger.error(f"Refresh: request #{token} failed: {error}")
        if self._on_error:
            self._on_error(error)
        return True

    def build(
            self,
            records: Sequence[FileCoverageRecord],
            include_tests: Optional[bool] = None,
            exclude_patterns: Optional[Sequence[str]] = None,
    ) -> Forest:
        """
        Run the tree pipeline, reusing the previous forest for identical input.

        Filter arguments left as None fall back to the values given at
        construction.
        """
        tests = self._include_tests if include_tests is None else bool(include_tests)
        patterns = self._exclude_patterns if exclude_patterns is None else tuple(exclude_patterns)

        key: Tuple = (tuple(records), tests, patterns)
        with self._lock:
            if key == self._memo_key:
                return list(self._memo_forest)

        forest = generate_coverage_tree(records, include_tests=tests, exclude_patterns=list(patterns))

        with self._lock:
            self._memo_key = key
            self._memo_forest = forest
        return forest
