"""
Shared test fixtures for hashbang tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from hashbang.core.dispatch import Host
from hashbang.core.log import configure_logging


class RecordingHost:
    """Fake Host collaborators that record what would have been run."""

    def __init__(self, executables=(), interactive=False, choice="exit"):
        self.executables = set(executables)
        self.interactive = interactive
        self.choice = choice
        self.runs: list[list[str]] = []
        self.prompts: list[tuple] = []
        self.classified: list[list[str]] = []

    def find_executable(self, name: str) -> str | None:
        if name in self.executables:
            return f"/usr/bin/{name}"
        return None

    def is_interactive_parent(self, gui_shells) -> bool:
        self.classified.append(list(gui_shells))
        return self.interactive

    def confirm(self, script, viewer: str) -> str:
        self.prompts.append((script, viewer))
        return self.choice

    def run(self, argv: list[str]) -> int:
        self.runs.append(list(argv))
        return 0

    def as_host(self) -> Host:
        return Host(
            find_executable=self.find_executable,
            is_interactive_parent=self.is_interactive_parent,
            confirm=self.confirm,
            run=self.run,
        )


@pytest.fixture
def which():
    """Factory for a fake PATH lookup that knows the given executables."""

    def _make(*names: str):
        known = set(names)

        def _which(name: str) -> str | None:
            return f"/usr/bin/{name}" if name in known else None

        return _which

    return _make


@pytest.fixture
def recording_host():
    """Factory for a RecordingHost."""

    def _make(executables=(), interactive=False, choice="exit") -> RecordingHost:
        return RecordingHost(executables, interactive, choice)

    return _make


@pytest.fixture
def write_script(tmp_path):
    """Factory that writes a script file and returns its path."""

    def _write(name: str, content: str = "", size: int | None = None) -> Path:
        path = tmp_path / name
        path.write_text(content)
        if size is not None:
            with open(path, "r+b") as f:
                f.truncate(size)
        return path

    return _write


@pytest.fixture(autouse=True)
def no_logging():
    """Leave logging disabled between tests."""
    yield
    configure_logging(None)
