from __future__ import annotations

"""
File Coverage Detail Dialog.

Opened when a file row is selected. Shows the navigation route of the file,
its counters for every reported metric family and the historical delta.
"""

from typing import List, Tuple

import customtkinter as ctk

from covtree.domain.coverage_models import METRIC_KINDS, TreeNode
from covtree.interface.tree_view.formatting import coverage_variant, trend_indicator
from covtree.interface.gui.components.tree_panel import VARIANT_COLORS
from covtree.utils.i18n import i18n


def metric_lines(node: TreeNode) -> List[Tuple[str, str, str]]:
    """
    Build (label, value, variant) triples for every reported metric.

    Metrics without a positive total are listed as 'n/a'.
    """
    out: List[Tuple[str, str, str]] = []
    for kind in METRIC_KINDS:
        covered, total = node.counts(kind)
        label = i18n.t(f"gui.detail.metrics.{kind.value}")
        percent = node.coverage(kind)
        if total is None or total <= 0 or percent is None:
            out.append((label, i18n.t("gui.detail.not_available"), ""))
            continue
        out.append((label, f"{covered or 0}/{total}  ({percent:.1f}%)", coverage_variant(percent)))
    return out


def show_file_detail(parent: ctk.CTk, node: TreeNode, route: str) -> ctk.CTkToplevel:
    """
    Display the detail modal for a file node.

    Args:
        parent: Parent window.
        node: File node (with overlay, if any).
        route: Navigation target of the file.

    Returns:
        ctk.CTkToplevel: The dialog window.
    """
    toplevel = ctk.CTkToplevel(parent)
    toplevel.title(i18n.t("gui.detail.title", name=node.name))
    toplevel.geometry("520x360")
    toplevel.grab_set()

    ctk.CTkLabel(
        toplevel,
        text=node.path,
        font=ctk.CTkFont(size=15, weight="bold"),
        wraplength=480,
    ).pack(pady=(20, 5), padx=20)

    route_entry = ctk.CTkEntry(toplevel, width=460)
    route_entry.insert(0, route)
    route_entry.configure(state="readonly")
    route_entry.pack(pady=(0, 15), padx=20)

    grid = ctk.CTkFrame(toplevel, fg_color="transparent")
    grid.pack(pady=5)
    for i, (label, value, variant) in enumerate(metric_lines(node)):
        ctk.CTkLabel(grid, text=f"{label}:", anchor="e", width=110).grid(row=i, column=0, padx=5, pady=2)
        ctk.CTkLabel(
            grid,
            text=value,
            anchor="w",
            width=220,
            text_color=VARIANT_COLORS.get(variant, ("gray10", "#DCE4EE")),
        ).grid(row=i, column=1, padx=5, pady=2)

    trend = trend_indicator(node.historical_coverage)
    if trend is not None and node.historical_coverage is not None:
        text = i18n.t(
            "gui.detail.historical",
            coverage=f"{node.historical_coverage.coverage:.1f}",
            tooltip=trend.tooltip,
        )
        ctk.CTkLabel(toplevel, text=f"{trend.arrow} {text}").pack(pady=10)

    def copy_route() -> None:
        toplevel.clipboard_clear()
        toplevel.clipboard_append(route)

    actions = ctk.CTkFrame(toplevel, fg_color="transparent")
    actions.pack(side="bottom", pady=15)
    ctk.CTkButton(actions, text=i18n.t("gui.buttons.copy_route"), command=copy_route).pack(side="left", padx=5)
    ctk.CTkButton(
        actions,
        text=i18n.t("gui.buttons.close"),
        fg_color="transparent",
        border_width=1,
        text_color=("gray10", "#DCE4EE"),
        command=toplevel.destroy,
    ).pack(side="left", padx=5)

    return toplevel
