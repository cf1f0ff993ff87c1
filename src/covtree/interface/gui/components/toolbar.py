from __future__ import annotations

"""
Toolbar UI Component.

Source selectors (report and history), the statement-coverage switch, the
comparison period selector and the tree actions. Widgets are exposed as
attributes so the controller can bind and read them.
"""

from typing import Any, Dict, List

import customtkinter as ctk

from covtree.domain.constants import HISTORICAL_PERIODS
from covtree.utils.i18n import i18n


def compare_options() -> List[str]:
    """Labels of the comparison selector; the first one disables comparison."""
    return [i18n.t("gui.compare.off")] + list(HISTORICAL_PERIODS)


class ToolbarFrame(ctk.CTkFrame):
    """Top bar of the coverage window."""

    def __init__(self, master: Any, config: Dict[str, Any], **kwargs: Any):
        super().__init__(master, corner_radius=10, **kwargs)
        self.grid_columnconfigure(1, weight=1)

        # --- Sources ---
        ctk.CTkLabel(self, text=i18n.t("gui.toolbar.input")).grid(
            row=0, column=0, padx=(15, 5), pady=(10, 5), sticky="w"
        )
        self.entry_input = ctk.CTkEntry(self)
        self.entry_input.insert(0, config.get("input_path", ""))
        self.entry_input.grid(row=0, column=1, padx=5, pady=(10, 5), sticky="ew")
        self.btn_browse_input = ctk.CTkButton(self, text=i18n.t("gui.buttons.browse"), width=90)
        self.btn_browse_input.grid(row=0, column=2, padx=(5, 15), pady=(10, 5))

        ctk.CTkLabel(self, text=i18n.t("gui.toolbar.history")).grid(
            row=1, column=0, padx=(15, 5), pady=5, sticky="w"
        )
        self.entry_history = ctk.CTkEntry(self)
        self.entry_history.insert(0, config.get("history_path", ""))
        self.entry_history.grid(row=1, column=1, padx=5, pady=5, sticky="ew")
        self.btn_browse_history = ctk.CTkButton(self, text=i18n.t("gui.buttons.browse"), width=90)
        self.btn_browse_history.grid(row=1, column=2, padx=(5, 15), pady=5)

        # --- View options ---
        options = ctk.CTkFrame(self, fg_color="transparent")
        options.grid(row=2, column=0, columnspan=3, sticky="ew", padx=10, pady=(5, 10))
        options.grid_columnconfigure(3, weight=1)

        self.sw_statements = ctk.CTkSwitch(options, text=i18n.t("gui.toolbar.statements"))
        if config.get("coverage_kind") == "statements":
            self.sw_statements.select()
        self.sw_statements.grid(row=0, column=0, padx=5, sticky="w")

        ctk.CTkLabel(options, text=i18n.t("gui.toolbar.compare")).grid(row=0, column=1, padx=(20, 5))
        self.seg_compare = ctk.CTkSegmentedButton(options, values=compare_options())
        self.seg_compare.set(config.get("compare_period") or compare_options()[0])
        self.seg_compare.grid(row=0, column=2, padx=5, sticky="w")

        self.btn_expand = ctk.CTkButton(options, text=i18n.t("gui.buttons.expand_all"), width=100)
        self.btn_expand.grid(row=0, column=4, padx=5)
        self.btn_collapse = ctk.CTkButton(options, text=i18n.t("gui.buttons.collapse_all"), width=100)
        self.btn_collapse.grid(row=0, column=5, padx=5)
        self.btn_logs = ctk.CTkButton(
            options,
            text=i18n.t("gui.buttons.logs"),
            width=70,
            fg_color="transparent",
            border_width=1,
            text_color=("gray10", "#DCE4EE"),
        )
        self.btn_logs.grid(row=0, column=6, padx=5)
        self.btn_reload = ctk.CTkButton(
            options,
            text=i18n.t("gui.buttons.reload"),
            width=110,
            font=ctk.CTkFont(weight="bold"),
        )
        self.btn_reload.grid(row=0, column=7, padx=(5, 0))

    def set_busy(self, busy: bool) -> None:
        """Lock the reload trigger while a fetch is running."""
        self.btn_reload.configure(
            state="disabled" if busy else "normal",
            text=i18n.t("gui.buttons.loading") if busy else i18n.t("gui.buttons.reload"),
        )
