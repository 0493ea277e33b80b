"""Tests for the OS-backed collaborators."""

from __future__ import annotations

import sys
from pathlib import Path

import psutil
import pytest

from hashbang import dialog, host
from hashbang.core.script import ScriptMetadata


class FakeProcess:
    def __init__(self, parent_name):
        self.parent_name = parent_name

    def parent(self):
        if self.parent_name is None:
            return None
        parent = FakeProcess(None)
        parent.name = lambda: self.parent_name
        return parent


class TestIsInteractiveParent:
    """Parent process classification."""

    @pytest.mark.parametrize(
        "parent, expected",
        [
            ("explorer.exe", True),
            ("EXPLORER.EXE", True),
            ("nautilus", True),
            ("bash", False),
            ("cmd.exe", False),
        ],
    )
    def test_names(self, monkeypatch, parent, expected):
        """Names compare case-insensitively."""
        monkeypatch.setattr(host.psutil, "Process", lambda: FakeProcess(parent))
        assert host.is_interactive_parent(["explorer.exe", "nautilus"]) is expected

    def test_exe_suffix_ignored(self, monkeypatch):
        """nautilus.exe and nautilus are the same shell."""
        monkeypatch.setattr(host.psutil, "Process", lambda: FakeProcess("Nautilus"))
        assert host.is_interactive_parent(["nautilus.exe"])

    def test_no_parent(self, monkeypatch):
        """An orphaned process is not interactive."""
        monkeypatch.setattr(host.psutil, "Process", lambda: FakeProcess(None))
        assert not host.is_interactive_parent(["explorer.exe"])

    def test_access_denied(self, monkeypatch):
        """An uninspectable parent is not interactive."""

        def denied():
            raise psutil.AccessDenied()

        monkeypatch.setattr(host.psutil, "Process", denied)
        assert not host.is_interactive_parent(["explorer.exe"])

    def test_real_parent_is_not_a_file_manager(self):
        """The test runner was not started by a file manager."""
        assert not host.is_interactive_parent(["explorer.exe", "nautilus"])


class TestRunCommand:
    """Process spawning."""

    def test_exit_status(self):
        """The child's exit status is returned."""
        assert host.run_command([sys.executable, "-c", "raise SystemExit(3)"]) == 3

    def test_missing_executable(self, tmp_path):
        """A missing executable raises OSError."""
        with pytest.raises(OSError):
            host.run_command([str(tmp_path / "no-such-program")])


class TestFindExecutable:
    def test_python_found(self):
        assert host.find_executable(sys.executable) is not None

    def test_missing(self):
        assert host.find_executable("hashbang-no-such-program") is None
        assert host.find_executable("") is None


class TestConfirm:
    """The dialog wrapper, with the window itself faked."""

    SCRIPT = ScriptMetadata(path=Path("/tmp/a.py"), size=1)

    def test_edit_opens_viewer(self, monkeypatch):
        """edit launches the viewer before returning."""
        launched = []
        monkeypatch.setattr(dialog, "ask", lambda script: "edit")
        monkeypatch.setattr(dialog, "find_executable", lambda name: None)
        monkeypatch.setattr(dialog, "run_command", lambda argv: launched.append(argv) or 0)
        assert dialog.confirm(self.SCRIPT, "gedit") == "edit"
        assert launched == [["gedit", "/tmp/a.py"]]

    def test_run_does_not_open_viewer(self, monkeypatch):
        launched = []
        monkeypatch.setattr(dialog, "ask", lambda script: "run")
        monkeypatch.setattr(dialog, "run_command", lambda argv: launched.append(argv) or 0)
        assert dialog.confirm(self.SCRIPT, "gedit") == "run"
        assert launched == []

    def test_viewer_failure_swallowed(self, monkeypatch):
        """A viewer that can't start doesn't fail the dispatch."""

        def fail(argv):
            raise FileNotFoundError(argv[0])

        monkeypatch.setattr(dialog, "ask", lambda script: "edit")
        monkeypatch.setattr(dialog, "run_command", fail)
        assert dialog.confirm(self.SCRIPT, "no-such-viewer") == "edit"

    def test_no_display(self, monkeypatch):
        """Without a usable display the dialog cancels."""

        def broken(script):
            raise RuntimeError("no display name and no $DISPLAY environment variable")

        monkeypatch.setattr(dialog, "ask", broken)
        assert dialog.confirm(self.SCRIPT, "gedit") == "exit"
