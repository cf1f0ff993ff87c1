from __future__ import annotations

"""
Coverage Tree Panel.

Scrollable list that draws the visible rows of a TreeViewState: a
disclosure button for directories with children, the node name (clickable
for files), the coverage bar and badge, and the trend indicator.
"""

import logging
from typing import Any, Callable, List

import customtkinter as ctk

from covtree.interface.tree_view.state import TreeRow
from covtree.utils.i18n import i18n

logger = logging.getLogger(__name__)

INDENT_PX = 18

VARIANT_COLORS = {
    "success": "#2CC985",
    "warning": "#F0AD4E",
    "error": "#D9534F",
}

TREND_COLORS = {
    "↑": "#2CC985",
    "↓": "#D9534F",
    "→": "gray50",
}


class TreePanel(ctk.CTkScrollableFrame):
    """Row-per-node view of a coverage forest."""

    def __init__(self, master: Any, **kwargs: Any):
        super().__init__(master, corner_radius=10, **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._row_frames: List[ctk.CTkFrame] = []

    def render_rows(
            self,
            rows: List[TreeRow],
            on_toggle: Callable[[str], None],
            on_select: Callable[[str], None],
            show_counts: bool = True,
    ) -> None:
        """
        Redraw the panel from scratch.

        Args:
            rows: Visible rows in display order.
            on_toggle: Called with a directory path when its disclosure is clicked.
            on_select: Called with a file path when its name is clicked.
            show_counts: Show 'covered/total' beside each badge.
        """
        self.clear()

        if not rows:
            self._add_placeholder(i18n.t("gui.tree.empty"))
            return

        for index, row in enumerate(rows):
            frame = ctk.CTkFrame(self, fg_color="transparent")
            frame.grid(row=index, column=0, sticky="ew")
            frame.grid_columnconfigure(1, weight=1)
            self._row_frames.append(frame)
            self._build_row(frame, row, on_toggle, on_select, show_counts)

        logger.debug(f"UI: Tree panel rendered {len(rows)} rows.")

    def clear(self) -> None:
        for frame in self._row_frames:
            frame.destroy()
        self._row_frames = []

    def _add_placeholder(self, text: str) -> None:
        frame = ctk.CTkFrame(self, fg_color="transparent")
        frame.grid(row=0, column=0, sticky="ew")
        ctk.CTkLabel(frame, text=text, text_color="gray50").pack(pady=30)
        self._row_frames.append(frame)

    def _build_row(
            self,
            frame: ctk.CTkFrame,
            row: TreeRow,
            on_toggle: Callable[[str], None],
            on_select: Callable[[str], None],
            show_counts: bool,
    ) -> None:
        node = row.node
        pad_left = 6 + row.depth * INDENT_PX

        if row.expandable:
            ctk.CTkButton(
                frame,
                text="▾" if row.expanded else "▸",
                width=22,
                height=22,
                fg_color="transparent",
                text_color=("gray10", "#DCE4EE"),
                command=lambda p=node.path: on_toggle(p),
            ).grid(row=0, column=0, padx=(pad_left, 2), pady=1)
        else:
            ctk.CTkLabel(frame, text="", width=22).grid(row=0, column=0, padx=(pad_left, 2), pady=1)

        if node.is_file:
            name = ctk.CTkButton(
                frame,
                text=node.name,
                anchor="w",
                fg_color="transparent",
                text_color=("#1F6AA5", "#5EA3E0"),
                hover_color=("gray85", "gray25"),
                command=lambda p=node.path: on_select(p),
            )
        else:
            name = ctk.CTkLabel(frame, text=f"{node.name}/", anchor="w", font=ctk.CTkFont(weight="bold"))
        name.grid(row=0, column=1, sticky="ew")

        display = row.coverage
        if display is not None:
            bar = ctk.CTkProgressBar(frame, width=120, progress_color=VARIANT_COLORS[display.variant])
            bar.set(display.bar_width / 100.0)
            bar.grid(row=0, column=2, padx=8)

            badge = display.percent_label
            if show_counts:
                badge = f"{display.count_label}  {badge}"
            ctk.CTkLabel(
                frame, text=badge, width=130, anchor="e", text_color=VARIANT_COLORS[display.variant]
            ).grid(row=0, column=3, padx=4)
        else:
            ctk.CTkLabel(frame, text="", width=130).grid(row=0, column=3, padx=4)

        trend = row.trend
        ctk.CTkLabel(
            frame,
            text=trend.label if trend else "",
            width=80,
            anchor="w",
            text_color=TREND_COLORS.get(trend.arrow, "gray50") if trend else "gray50",
        ).grid(row=0, column=4, padx=(4, 8))
