from __future__ import annotations

"""
Main Application Window Factory.

Creates the root CustomTkinter window and its three-row grid: toolbar,
coverage tree and status bar.
"""

import customtkinter as ctk

from covtree.domain import constants as const

# -----------------------------------------------------------------------------
# ROOT WINDOW CONSTRUCTION
# -----------------------------------------------------------------------------

def create_main_window(theme: str = "System") -> ctk.CTk:
    """
    Instantiate and configure the primary application window.

    Args:
        theme: Appearance mode (System, Light or Dark).

    Returns:
        ctk.CTk: The configured root application instance.
    """
    ctk.set_appearance_mode(theme)
    ctk.set_default_color_theme("blue")

    app = ctk.CTk()
    app.title(f"{const.APP_NAME} - v{const.CURRENT_CONFIG_VERSION}")
    app.geometry("1000x720")

    # Row 0: toolbar, Row 1: tree (stretches), Row 2: status bar
    app.grid_columnconfigure(0, weight=1)
    app.grid_rowconfigure(1, weight=1)

    return app


def create_status_bar(master: ctk.CTk) -> ctk.CTkLabel:
    """Single-line label used for load progress and errors."""
    label = ctk.CTkLabel(master, text="", anchor="w")
    label.grid(row=2, column=0, sticky="ew", padx=12, pady=(0, 8))
    return label
