from __future__ import annotations

"""
Interactive Coverage Tree State.

Headless state machine behind every coverage tree consumer. Holds the
per-directory expansion flags (keyed by node path so they survive rebuilds),
the global line/statement toggle and the historical comparison overlay, and
flattens the forest into the rows that a renderer draws.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

from covtree.core.analysis.historical import apply_historical_overlay
from covtree.domain.constants import DEFAULT_EXPAND_DEPTH
from covtree.domain.coverage_models import CoverageKind, Forest, TreeNode
from covtree.interface.tree_view.formatting import (
    CoverageDisplay,
    TrendIndicator,
    coverage_display,
    navigation_target,
    trend_indicator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeRow:
    """
    A single visible line of the tree.

    Attributes:
        node: Node rendered by the row.
        depth: Nesting level (top-level nodes are depth 0).
        expandable: Whether a disclosure control is shown.
        expanded: Current disclosure state (False for files).
        coverage: Badge data, None when the metric has no data.
        trend: Historical indicator, None without overlay.
    """
    node: TreeNode
    depth: int
    expandable: bool
    expanded: bool
    coverage: Optional[CoverageDisplay]
    trend: Optional[TrendIndicator]


class TreeViewState:
    """
    Expansion, toggle and navigation state for a coverage forest.

    Directories at a depth below 'expand_depth' start expanded. Toggling a
    directory only flips its own flag; descendants keep whatever state they
    had, so re-expanding restores the previous view.
    """

    def __init__(
            self,
            forest: Optional[Forest] = None,
            coverage_kind: CoverageKind = CoverageKind.LINES,
            expand_depth: int = DEFAULT_EXPAND_DEPTH,
            navigator: Optional[Callable[[str], None]] = None,
    ) -> None:
        """
        Args:
            forest: Aggregated and sorted forest to display.
            coverage_kind: Initial metric family.
            expand_depth: Number of levels expanded by default.
            navigator: Receives the route of every selected file.
        """
        self.coverage_kind = coverage_kind
        self.expand_depth = expand_depth
        self.navigator = navigator

        self._base_forest: Forest = []
        self._historical: Optional[Dict[str, float]] = None
        self._display_cache: Optional[Forest] = None

        self._expanded: Dict[str, bool] = {}
        self._directory_depths: Dict[str, int] = {}
        self._files: Dict[str, TreeNode] = {}

        self.set_forest(forest or [])

    # -------------------------------------------------------------------------
    # DATA BINDING
    # -------------------------------------------------------------------------

    def set_forest(self, forest: Forest) -> None:
        """Replace the displayed forest, keeping expansion state by path."""
        self._base_forest = list(forest)
        self._display_cache = None
        self._directory_depths = {}
        self._files = {}
        self._index(self._base_forest, 0)

    def set_historical(self, historical: Optional[Mapping[str, float]]) -> None:
        """Attach (or clear with None) the previous-period coverage map."""
        self._historical = dict(historical) if historical is not None else None
        self._display_cache = None

    @property
    def has_historical(self) -> bool:
        return self._historical is not None

    @property
    def forest(self) -> Forest:
        """Forest as displayed, with the historical overlay applied."""
        if self._display_cache is None:
            if self._historical is None:
                self._display_cache = list(self._base_forest)
            else:
                self._display_cache = apply_historical_overlay(
                    self._base_forest, self._historical, self.coverage_kind
                )
        return self._display_cache

    # -------------------------------------------------------------------------
    # COVERAGE KIND TOGGLE
    # -------------------------------------------------------------------------

    @property
    def use_statement_coverage(self) -> bool:
        return self.coverage_kind is CoverageKind.STATEMENTS

    def set_coverage_kind(self, kind: CoverageKind) -> None:
        if kind is not self.coverage_kind:
            self.coverage_kind = kind
            self._display_cache = None

    def toggle_statement_coverage(self) -> CoverageKind:
        """Switch between line and statement coverage; return the new kind."""
        new_kind = CoverageKind.LINES if self.use_statement_coverage else CoverageKind.STATEMENTS
        self.set_coverage_kind(new_kind)
        return new_kind

    # -------------------------------------------------------------------------
    # EXPANSION
    # -------------------------------------------------------------------------

    def is_expanded(self, path: str, depth: Optional[int] = None) -> bool:
        """Current disclosure state of a directory path."""
        if path in self._expanded:
            return self._expanded[path]
        if depth is None:
            depth = self._directory_depths.get(path, self.expand_depth)
        return depth < self.expand_depth

    def toggle(self, path: str) -> Optional[bool]:
        """
        Flip the disclosure state of one directory.

        Args:
            path: Directory path.

        Returns:
            Optional[bool]: New state, or None if the path is not a directory.
        """
        if path not in self._directory_depths:
            return None
        new_state = not self.is_expanded(path)
        self._expanded[path] = new_state
        return new_state

    def expand_all(self) -> None:
        for path in self._directory_depths:
            self._expanded[path] = True

    def collapse_all(self) -> None:
        for path in self._directory_depths:
            self._expanded[path] = False

    # -------------------------------------------------------------------------
    # NAVIGATION
    # -------------------------------------------------------------------------

    def select(self, path: str) -> Optional[str]:
        """
        Handle a click on a row.

        File rows emit a navigation request; directory rows never navigate.

        Args:
            path: Path of the clicked node.

        Returns:
            Optional[str]: Route sent to the navigator, or None.
        """
        if path not in self._files:
            return None
        target = navigation_target(path)
        logger.debug(f"Tree view: navigating to {target}")
        if self.navigator:
            self.navigator(target)
        return target

    @property
    def file_count(self) -> int:
        return len(self._files)

    def find_node(self, path: str) -> Optional[TreeNode]:
        """Look up a displayed node (overlay included) by its path."""
        stack = list(self.forest)
        while stack:
            node = stack.pop()
            if node.path == path:
                return node
            stack.extend(node.children)
        return None

    # -------------------------------------------------------------------------
    # ROWS
    # -------------------------------------------------------------------------

    def visible_rows(self) -> List[TreeRow]:
        """Flatten the expanded part of the forest in display order."""
        rows: List[TreeRow] = []
        self._collect_rows(self.forest, 0, rows)
        return rows

    def _collect_rows(self, nodes: Forest, depth: int, rows: List[TreeRow]) -> None:
        for node in nodes:
            expandable = node.is_directory and bool(node.children)
            expanded = expandable and self.is_expanded(node.path, depth)
            rows.append(TreeRow(
                node=node,
                depth=depth,
                expandable=expandable,
                expanded=expanded,
                coverage=coverage_display(node, self.coverage_kind),
                trend=trend_indicator(node.historical_coverage),
            ))
            if expanded:
                self._collect_rows(list(node.children), depth + 1, rows)

    def _index(self, nodes: Forest, depth: int) -> None:
        for node in nodes:
            if node.is_directory:
                self._directory_depths[node.path] = depth
                self._index(list(node.children), depth + 1)
            else:
                self._files[node.path] = node
