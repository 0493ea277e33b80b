"""
Dispatch decisions for hashbang.

Decides what happens to a script once its metadata is known:

- No association: open it in the fallback viewer (large-file viewer above the
  size threshold, default viewer otherwise).
- Launched from a terminal or another script: run it, never prompt.
- Launched from a file manager: run it, open it in a viewer, or ask, depending
  on the resolved operation.

Everything that touches the OS goes through a Host so tests can swap in fakes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from hashbang.core.command import build_command, build_fallback_command
from hashbang.core.config import Config, Operation, platform_viewer
from hashbang.core.log import log
from hashbang.core.parser import format_command
from hashbang.core.script import ScriptMetadata

Choice = Literal["run", "edit", "exit"]


@dataclass(frozen=True)
class Host:
    """OS-facing collaborators used during dispatch."""

    find_executable: Callable[[str], str | None]
    """PATH lookup: resolved path or None."""

    is_interactive_parent: Callable[[Sequence[str]], bool]
    """True when the parent process is one of the given GUI shells."""

    confirm: Callable[[ScriptMetadata, str], Choice]
    """Ask the user to run, edit or cancel. "edit" has already opened the viewer."""

    run: Callable[[list[str]], int]
    """Spawn argv with inherited streams, wait, return its exit status."""


def resolve_operation(script: ScriptMetadata, config: Config) -> Operation:
    """Association override, then config default, then prompt."""
    if script.association is not None and script.association.default_operation:
        return script.association.default_operation
    if config.default_operation is not None:
        return config.default_operation
    return "prompt"


def resolve_viewer(
    script: ScriptMetadata,
    config: Config,
    find_executable: Callable[[str], str | None],
) -> str:
    """Viewer for prompt/open.

    Priority: association viewer, large-file viewer (at or above the
    threshold), default viewer, platform fallback.
    """
    if script.association is not None and script.association.view_runtime:
        return script.association.view_runtime

    large = config.default_large
    if large is not None:
        if script.size_mb >= large.size_mb_threshold:
            log("viewer_resolved", source="default_large", size_mb=script.size_mb)
            return large.view_runtime
        log("viewer_within_threshold", size_mb=script.size_mb)

    if config.default is not None:
        return config.default.view_runtime

    return platform_viewer(find_executable)


def _run(host: Host, argv: list[str], event: str) -> int:
    log(event, command=format_command(argv))
    status = host.run(argv)
    log("exited", status=status)
    return status


def dispatch_fallback(script: ScriptMetadata, config: Config, host: Host) -> None:
    """Open a script that has no association in the fallback viewer."""
    argv = build_fallback_command(script, config, host.find_executable)
    _run(host, argv, "fallback_dispatched")


def dispatch_interactive(
    script: ScriptMetadata, command: list[str], config: Config, host: Host
) -> None:
    """Dispatch for a launch from a GUI shell: execute, open or prompt."""
    operation = resolve_operation(script, config)
    viewer = resolve_viewer(script, config, host.find_executable)
    log("operation_resolved", operation=operation, viewer=viewer)

    if operation == "execute":
        _run(host, command, "dispatched")
    elif operation == "open":
        viewer_path = host.find_executable(viewer) or viewer
        _run(host, [viewer_path, str(script.path)], "opened")
    else:
        choice = host.confirm(script, viewer)
        log("prompt_answered", choice=choice)
        if choice == "run":
            _run(host, command, "dispatched")
        # "edit": the dialog already opened the viewer; "exit": nothing to do


def dispatch(
    script: ScriptMetadata,
    config: Config,
    host: Host,
    extra_args: Sequence[str] = (),
) -> None:
    """Dispatch a script. Raises OSError if a process can't be spawned."""
    if script.association is None:
        log("no_association", path=str(script.path))
        dispatch_fallback(script, config, host)
        return

    command = build_command(script, extra_args)

    if host.is_interactive_parent(config.gui_shells):
        dispatch_interactive(script, command, config, host)
    else:
        _run(host, command, "dispatched")
