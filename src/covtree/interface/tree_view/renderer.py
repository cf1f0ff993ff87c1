from __future__ import annotations

"""
Coverage Tree Renderer.

Converts the visible part of a coverage tree into ASCII lines. Handles
connector indentation and appends the coverage badge and historical trend
of every node, honoring the expansion state of the tree view.
"""

import logging
import os
from typing import List

from covtree.domain.coverage_models import Forest, TreeNode
from covtree.interface.tree_view.formatting import coverage_display, trend_indicator
from covtree.interface.tree_view.state import TreeViewState

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_coverage_tree(state: TreeViewState, show_counts: bool = True) -> List[str]:
    """
    Render the forest held by a tree view state.

    Args:
        state: View state providing forest, metric family and expansion flags.
        show_counts: Append 'covered/total' next to the percentage.

    Returns:
        List[str]: Visual lines of the tree.
    """
    lines: List[str] = []
    render_tree_structure(state.forest, lines, state, prefix="", depth=0, show_counts=show_counts)
    return lines


def render_tree_structure(
        nodes: Forest,
        lines: List[str],
        state: TreeViewState,
        prefix: str = "",
        depth: int = 0,
        show_counts: bool = True,
) -> None:
    """
    Recursively transform tree nodes into a list of strings.

    Uses standard ASCII connectors (├──, └──). Collapsed directories are
    printed without their children.

    Args:
        nodes: Sibling nodes to process, already sorted.
        lines: Accumulator list for output strings.
        state: View state used for expansion and metric selection.
        prefix: Indentation prefix for the current recursion level.
        depth: Nesting level of 'nodes'.
        show_counts: Append 'covered/total' to every badge.
    """
    total = len(nodes)

    for i, node in enumerate(nodes):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        lines.append(f"{prefix}{connector}{_format_label(node, state, show_counts)}")

        if node.is_directory and node.children and state.is_expanded(node.path, depth):
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_tree_structure(
                list(node.children),
                lines,
                state,
                prefix=new_prefix,
                depth=depth + 1,
                show_counts=show_counts,
            )


def save_tree_to_disk(save_path: str, lines: List[str]) -> bool:
    """
    Persist rendered tree lines to the filesystem.

    Args:
        save_path: Target file path.
        lines: Rendered lines.

    Returns:
        bool: True on success, False if the file could not be written.
    """
    try:
        out_dir = os.path.dirname(os.path.abspath(save_path))
        os.makedirs(out_dir, exist_ok=True)
        with open(save_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        logger.info(f"Tree saved to file: {save_path}")
        return True
    except OSError as e:
        logger.error(f"Failed to save tree to '{save_path}': {e}")
        return False

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _format_label(node: TreeNode, state: TreeViewState, show_counts: bool) -> str:
    """Compose 'name  [covered/total] pct  trend' for one node."""
    name = f"{node.name}/" if node.is_directory else node.name
    if node.is_directory and node.children and not state.is_expanded(node.path):
        name += " (+)"

    parts = [name]
    display = coverage_display(node, state.coverage_kind)
    if display is not None:
        badge = display.percent_label
        if show_counts:
            badge = f"{display.count_label} ({badge})"
        parts.append(badge)

    trend = trend_indicator(node.historical_coverage)
    if trend is not None:
        parts.append(trend.label)

    return "  ".join(parts)
