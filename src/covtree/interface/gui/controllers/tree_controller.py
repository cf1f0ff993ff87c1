from __future__ import annotations

"""
Coverage Tree Controller.

Bridges the toolbar, the tree panel and the status bar with the headless
TreeViewState. Reloads run on background threads through a
CoverageRefresher; results are marshalled back to the Tk event loop with
app.after() before they touch any widget.
"""

import logging
from typing import Any, Callable, Dict, Optional

import customtkinter as ctk

from covtree.core.services.refresh import CoverageRefresher
from covtree.domain import config as cfg
from covtree.domain.coverage_models import CoverageKind, Forest
from covtree.interface.gui import threads
from covtree.interface.gui.components.toolbar import compare_options
from covtree.interface.gui.dialogs import file_detail
from covtree.interface.tree_view.state import TreeViewState
from covtree.utils.i18n import i18n

logger = logging.getLogger(__name__)

# ==============================================================================
# TREE CONTROLLER
# ==============================================================================

class TreeController:
    """
    Owns the view state of the coverage window and reacts to UI events.

    The controller never blocks the event loop: loading happens on worker
    threads, and only the latest reload request is ever applied.
    """

    def __init__(
            self,
            app: ctk.CTk,
            config: Dict[str, Any],
            app_state: Dict[str, Any],
            start_loader: Optional[Callable[[Dict[str, Any], int, CoverageRefresher], Any]] = None,
    ):
        """
        Args:
            app: Root CustomTkinter application instance.
            config: Active session configuration dictionary.
            app_state: Global persistent application state.
            start_loader: Spawns the background load for a request.
        """
        self.app = app
        self.config = config
        self.app_state = app_state
        self._start_loader = start_loader or threads.start_load_thread

        self.toolbar_view: Any = None
        self.tree_view: Any = None
        self.status_view: Any = None
        self._selected_path: Optional[str] = None

        self.state = TreeViewState(
            coverage_kind=CoverageKind(config.get("coverage_kind", "lines")),
            expand_depth=int(config.get("expand_depth", 2)),
            navigator=self._open_file_detail,
        )
        self.refresher = CoverageRefresher(
            on_tree=self._on_tree_ready,
            on_error=self._on_load_failed,
            include_tests=bool(config.get("include_tests", False)),
            exclude_patterns=config.get("exclude_patterns", []),
        )

    # -------------------------------------------------------------------------
    # VIEW REGISTRATION
    # -------------------------------------------------------------------------

    def register_views(self, toolbar: Any, tree: Any, status: Any) -> None:
        self.toolbar_view = toolbar
        self.tree_view = tree
        self.status_view = status

    # -------------------------------------------------------------------------
    # CONFIGURATION SYNCHRONIZATION
    # -------------------------------------------------------------------------

    def sync_view_from_config(self) -> None:
        """Populate toolbar widgets from the session configuration."""
        if not self.toolbar_view:
            return

        for key, widget in (
                ("input_path", self.toolbar_view.entry_input),
                ("history_path", self.toolbar_view.entry_history),
        ):
            widget.delete(0, "end")
            widget.insert(0, self.config.get(key, ""))

        if self.config.get("coverage_kind") == CoverageKind.STATEMENTS.value:
            self.toolbar_view.sw_statements.select()
        else:
            self.toolbar_view.sw_statements.deselect()

        self.toolbar_view.seg_compare.set(self.config.get("compare_period") or compare_options()[0])

    def sync_config_from_view(self) -> None:
        """Scrape toolbar widget values into the session configuration."""
        if not self.toolbar_view:
            return

        self.config["input_path"] = self.toolbar_view.entry_input.get().strip()
        self.config["history_path"] = self.toolbar_view.entry_history.get().strip()
        self.config["coverage_kind"] = (
            CoverageKind.STATEMENTS.value if self.toolbar_view.sw_statements.get() else CoverageKind.LINES.value
        )
        self.config["compare_period"] = _period_from_label(self.toolbar_view.seg_compare.get())

    # -------------------------------------------------------------------------
    # LOADING
    # -------------------------------------------------------------------------

    def reload(self) -> Optional[int]:
        """
        Start a background load for the current configuration.

        Returns:
            Optional[int]: Request token, or None if no source is configured.
        """
        self.sync_config_from_view()

        if not self.config.get("input_path") and not self.config.get("history_path"):
            self._set_status(i18n.t("gui.status.no_input"))
            return None

        token = self.refresher.begin_request()
        self._set_busy(True)
        self._set_status(i18n.t("gui.status.loading"))
        logger.debug(f"Controller: reload #{token} requested. Config: {self.config}")

        self._start_loader(self.config, token, self.refresher)
        return token

    def _on_tree_ready(self, forest: Forest, historical: Optional[Dict[str, float]]) -> None:
        """Refresher callback (worker thread)."""
        self.app.after(0, lambda: self.apply_tree(forest, historical))

    def _on_load_failed(self, error: Exception) -> None:
        """Refresher callback (worker thread)."""
        self.app.after(0, lambda: self.show_error(error))

    def apply_tree(self, forest: Forest, historical: Optional[Dict[str, float]]) -> None:
        """Bind a freshly built forest to the view state and redraw."""
        self.state.set_coverage_kind(CoverageKind(self.config.get("coverage_kind", "lines")))
        self.state.set_forest(forest)
        self.state.set_historical(historical)
        self._set_busy(False)

        if self.config.get("compare_period") and historical is None:
            self._set_status(i18n.t("gui.status.no_history", count=self.state.file_count))
        else:
            self._set_status(i18n.t("gui.status.loaded", count=self.state.file_count))
        self.redraw()

    def show_error(self, error: Exception) -> None:
        """Report a failed load; the previous tree stays on screen."""
        self._set_busy(False)
        self._set_status(i18n.t("gui.status.error", error=str(error)))

    # -------------------------------------------------------------------------
    # UI EVENT HANDLERS
    # -------------------------------------------------------------------------

    def on_statements_toggled(self) -> None:
        """Switch metric family; historical coverage is per family, so reload."""
        self.sync_config_from_view()
        self.state.set_coverage_kind(CoverageKind(self.config["coverage_kind"]))
        self.redraw()
        if self.state.has_historical:
            self.reload()

    def on_compare_selected(self, _value: str) -> None:
        self.reload()

    def on_toggle_row(self, path: str) -> None:
        if self.state.toggle(path) is not None:
            self.redraw()

    def on_select_row(self, path: str) -> None:
        self._selected_path = path
        self.state.select(path)

    def expand_all(self) -> None:
        self.state.expand_all()
        self.redraw()

    def collapse_all(self) -> None:
        self.state.collapse_all()
        self.redraw()

    def redraw(self) -> None:
        if not self.tree_view:
            return
        self.tree_view.render_rows(
            self.state.visible_rows(),
            on_toggle=self.on_toggle_row,
            on_select=self.on_select_row,
            show_counts=bool(self.config.get("show_counts", True)),
        )

    def persist_session(self) -> None:
        """Store the current session as the last one."""
        self.sync_config_from_view()
        self.app_state["last_session"] = self.config
        cfg.save_app_state(self.app_state)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _open_file_detail(self, route: str) -> None:
        """Navigator of the view state: show the detail dialog of a file."""
        node = self.state.find_node(self._selected_path) if self._selected_path else None
        if node is None:
            logger.warning(f"Controller: no file node for route {route}")
            return
        file_detail.show_file_detail(self.app, node, route)

    def _set_status(self, text: str) -> None:
        if self.status_view:
            self.status_view.configure(text=text)

    def _set_busy(self, busy: bool) -> None:
        if self.toolbar_view:
            self.toolbar_view.set_busy(busy)


def _period_from_label(label: str) -> str:
    """Map the segmented-control label to a compare_period value."""
    return "" if label == compare_options()[0] else label

