from __future__ import annotations

"""
GUI Entrypoint and Application Lifecycle Orchestrator.

Initializes logging and the CustomTkinter window, restores the last
session, wires toolbar and tree events to the TreeController, and persists
the session on close.
"""

import logging
from typing import Optional

import customtkinter as ctk

from covtree.core.pipeline.stages.validator import validate_config
from covtree.domain import config as cfg
from covtree.domain import constants as const
from covtree.infra.logging import LoggingConfig, configure_logging, get_default_log_path
from covtree.interface.gui.components.main_window import create_main_window, create_status_bar
from covtree.interface.gui.components.toolbar import ToolbarFrame
from covtree.interface.gui.components.tree_panel import TreePanel
from covtree.interface.gui.controllers.tree_controller import TreeController
from covtree.interface.gui.dialogs.log_viewer import show_log_viewer
from covtree.utils.i18n import i18n

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# MAIN APPLICATION LOOP
# -----------------------------------------------------------------------------

def main() -> None:
    """Launch the coverage tree window."""
    # PHASE 1: Diagnostics
    configure_logging(LoggingConfig(level="INFO", console=True, log_file=get_default_log_path()))
    logger.info(f"GUI Lifecycle: Initializing v{const.CURRENT_CONFIG_VERSION}")

    # PHASE 2: Persistent state recovery
    app_state = cfg.load_app_state()
    locale = app_state["app_settings"].get("locale", i18n.locale)
    if locale != i18n.locale and locale in i18n.available_locales():
        i18n.load_locale(locale)
    config, warnings = validate_config(cfg.load_config(), strict=False)
    for w in warnings:
        logger.warning(f"State Warning: {w}")

    # PHASE 3: View construction
    app = create_main_window(app_state["app_settings"].get("theme", "System"))

    toolbar = ToolbarFrame(app, config)
    toolbar.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))

    tree_panel = TreePanel(app)
    tree_panel.grid(row=1, column=0, sticky="nsew", padx=12, pady=6)

    status_bar = create_status_bar(app)

    # PHASE 4: Controller binding
    controller = TreeController(app, config, app_state)
    controller.register_views(toolbar, tree_panel, status_bar)
    controller.sync_view_from_config()

    toolbar.btn_reload.configure(command=controller.reload)
    toolbar.btn_expand.configure(command=controller.expand_all)
    toolbar.btn_collapse.configure(command=controller.collapse_all)
    toolbar.btn_logs.configure(command=lambda: show_log_viewer(app))
    toolbar.sw_statements.configure(command=controller.on_statements_toggled)
    toolbar.seg_compare.configure(command=controller.on_compare_selected)
    toolbar.btn_browse_input.configure(
        command=lambda: _browse_json(app, toolbar.entry_input, i18n.t("gui.dialogs.select_input"))
    )
    toolbar.btn_browse_history.configure(
        command=lambda: _browse_json(app, toolbar.entry_history, i18n.t("gui.dialogs.select_history"))
    )

    # PHASE 5: Initial load
    controller.redraw()
    if config.get("input_path") or config.get("history_path"):
        app.after(100, controller.reload)

    # PHASE 6: Lifecycle finalization
    def on_closing() -> None:
        controller.persist_session()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_closing)
    app.mainloop()


# -----------------------------------------------------------------------------
# PRIVATE UI HELPERS
# -----------------------------------------------------------------------------

def _browse_json(app: ctk.CTk, entry_widget: ctk.CTkEntry, title: str) -> Optional[str]:
    """Ask for a JSON document and write its path into the entry."""
    path = ctk.filedialog.askopenfilename(
        parent=app,
        title=title,
        filetypes=[("JSON", "*.json"), ("All files", "*.*")],
    )
    if path:
        entry_widget.delete(0, "end")
        entry_widget.insert(0, path)
    return path or None


if __name__ == "__main__":
    main()
