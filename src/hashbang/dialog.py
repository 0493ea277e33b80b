"""Run / Edit / Cancel confirmation dialog shown for file-manager launches."""

from __future__ import annotations

from hashbang.core.dispatch import Choice
from hashbang.core.log import log
from hashbang.core.script import ScriptMetadata
from hashbang.host import find_executable, run_command

TITLE = "Script Execution"
MESSAGE = "Do you want to run the script?"


def ask(script: ScriptMetadata) -> Choice:
    """Show the dialog and return the button pressed. Closing it means exit."""
    import tkinter as tk
    from tkinter import ttk

    choice: list[Choice] = ["exit"]

    root = tk.Tk()
    root.title(TITLE)
    root.resizable(False, False)
    root.attributes("-topmost", True)

    frame = ttk.Frame(root, padding=16)
    frame.grid()
    ttk.Label(frame, text=MESSAGE).grid(row=0, column=0, columnspan=3, sticky="w")
    ttk.Label(frame, text=str(script.path)).grid(
        row=1, column=0, columnspan=3, sticky="w", pady=(4, 12)
    )

    def pick(value: Choice) -> None:
        choice[0] = value
        root.destroy()

    ttk.Button(frame, text="Run", command=lambda: pick("run")).grid(row=2, column=0, padx=4)
    ttk.Button(frame, text="Edit", command=lambda: pick("edit")).grid(row=2, column=1, padx=4)
    cancel = ttk.Button(frame, text="Cancel", command=lambda: pick("exit"))
    cancel.grid(row=2, column=2, padx=4)
    cancel.focus_set()

    root.bind("<Escape>", lambda _event: pick("exit"))
    root.protocol("WM_DELETE_WINDOW", lambda: pick("exit"))
    root.mainloop()
    return choice[0]


def open_in_viewer(script: ScriptMetadata, viewer: str) -> None:
    """Open script in viewer and wait. Failures are logged, not raised."""
    argv = [find_executable(viewer) or viewer, str(script.path)]
    try:
        status = run_command(argv)
        log("viewer_exited", viewer=viewer, status=status)
    except OSError as e:
        log("viewer_failed", level="warning", viewer=viewer, error=str(e))


def confirm(script: ScriptMetadata, viewer: str) -> Choice:
    """Ask whether to run or edit script. "edit" opens the viewer before returning."""
    try:
        choice = ask(script)
    except ImportError:
        log("dialog_unavailable", level="warning", reason="tkinter not installed")
        return "exit"
    except Exception as e:  # tkinter.TclError when there is no display
        log("dialog_unavailable", level="warning", reason=str(e))
        return "exit"

    if choice == "edit":
        open_in_viewer(script, viewer)
    return choice
