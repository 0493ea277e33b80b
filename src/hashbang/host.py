"""OS collaborators for hashbang: PATH lookup, parent process, process spawning."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence

import psutil

from hashbang.core.dispatch import Host
from hashbang.core.log import log


def find_executable(name: str) -> str | None:
    """Resolve name on PATH."""
    if not name:
        return None
    return shutil.which(name)


def _normalize_process_name(name: str) -> str:
    name = name.casefold()
    return name[:-4] if name.endswith(".exe") else name


def parent_process_name() -> str | None:
    """Name of the parent process, or None if it can't be inspected."""
    try:
        parent = psutil.Process().parent()
        return parent.name() if parent is not None else None
    except psutil.Error:
        return None


def is_interactive_parent(gui_shells: Sequence[str]) -> bool:
    """True if the parent process is one of gui_shells (case-insensitive)."""
    name = parent_process_name()
    interactive = name is not None and _normalize_process_name(name) in {
        _normalize_process_name(shell) for shell in gui_shells
    }
    log("parent_classified", parent=name, gui_shells=list(gui_shells), interactive=interactive)
    return interactive


def run_command(argv: list[str]) -> int:
    """Run argv with inherited stdio and wait. Raises OSError if it can't start."""
    completed = subprocess.run(argv, check=False)
    return completed.returncode


def default_host() -> Host:
    """Host backed by the real OS."""
    from hashbang.dialog import confirm

    return Host(
        find_executable=find_executable,
        is_interactive_parent=is_interactive_parent,
        confirm=confirm,
        run=run_command,
    )
