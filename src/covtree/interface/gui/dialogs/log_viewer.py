from __future__ import annotations

"""
Log Viewer Dialog.

Read-only tail of the persistent GUI log file, with clipboard copy for
bug reports.
"""

import customtkinter as ctk

from covtree.infra.logging import get_recent_logs
from covtree.utils.i18n import i18n

LOG_TAIL_LINES = 200


def show_log_viewer(parent: ctk.CTk) -> ctk.CTkToplevel:
    """Open a window with the most recent log lines."""
    toplevel = ctk.CTkToplevel(parent)
    toplevel.title(i18n.t("gui.logs.title"))
    toplevel.geometry("760x460")
    toplevel.grid_columnconfigure(0, weight=1)
    toplevel.grid_rowconfigure(0, weight=1)

    content = get_recent_logs(LOG_TAIL_LINES)

    textbox = ctk.CTkTextbox(toplevel, font=("Consolas", 10))
    textbox.insert("1.0", content)
    textbox.configure(state="disabled")
    textbox.see("end")
    textbox.grid(row=0, column=0, sticky="nsew", padx=10, pady=(10, 5))

    def copy_logs() -> None:
        toplevel.clipboard_clear()
        toplevel.clipboard_append(content)

    ctk.CTkButton(toplevel, text=i18n.t("gui.logs.copy"), command=copy_logs).grid(
        row=1, column=0, sticky="e", padx=10, pady=(5, 10)
    )
    return toplevel
