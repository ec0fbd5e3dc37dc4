"""
Pytest configuration and shared fixtures for launcher tests.
"""

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vnet_launcher.tmux import TmuxError


class FakeTmuxService:
    """In-memory tmux server.

    Each session is a list of panes; the last pane added is the active one,
    matching tmux's behavior after split-window.
    """

    def __init__(
        self,
        sessions: list[str] | None = None,
        available: bool = True,
        attach_exit_code: int = 0,
        fail_on: str | None = None,
    ):
        self.sessions: dict[str, list[dict[str, str]]] = {
            name: [] for name in sessions or []
        }
        self.options: dict[str, dict[str, str]] = {}
        self.layouts: dict[str, list[str]] = {}
        self.start_directories: dict[str, str | None] = {}
        self.calls: list[tuple[str, str]] = []
        self.attached: list[str] = []
        self.available = available
        self.attach_exit_code = attach_exit_code
        self.fail_on = fail_on

    def _record(self, operation: str, session_name: str) -> None:
        self.calls.append((operation, session_name))
        if operation == self.fail_on:
            raise TmuxError(f"tmux {operation} failed", session_name)

    def _panes(self, session_name: str) -> list[dict[str, str]]:
        if session_name not in self.sessions:
            raise TmuxError(f"can't find session: {session_name}", session_name)
        return self.sessions[session_name]

    def is_available(self) -> bool:
        return self.available

    async def list_sessions(self) -> list[str]:
        return list(self.sessions)

    async def kill_session(self, session_name: str) -> None:
        self._record("kill", session_name)
        self._panes(session_name)
        del self.sessions[session_name]

    async def cleanup_sessions(
        self, prefix: str, on_kill: Callable[[str], None] | None = None
    ) -> list[str]:
        killed = []
        for name in [name for name in self.sessions if name.startswith(prefix)]:
            await self.kill_session(name)
            killed.append(name)
            if on_kill:
                on_kill(name)
        return killed

    async def create_session(
        self, session_name: str, command: str, start_directory: str | None = None
    ) -> None:
        self._record("create", session_name)
        if session_name in self.sessions:
            raise TmuxError(f"Session {session_name} already exists", session_name)
        self.sessions[session_name] = [{"command": command, "title": ""}]
        self.start_directories[session_name] = start_directory

    async def split_window(self, session_name: str, command: str) -> None:
        self._record("split", session_name)
        self._panes(session_name).append({"command": command, "title": ""})

    async def set_pane_title(self, session_name: str, title: str) -> None:
        self._record("title", session_name)
        self._panes(session_name)[-1]["title"] = title

    async def select_layout(self, session_name: str, layout: str) -> None:
        self._record("layout", session_name)
        self.layouts.setdefault(session_name, []).append(layout)

    async def set_option(self, session_name: str, option: str, value: str) -> None:
        self._record("option", session_name)
        self.options.setdefault(session_name, {})[option] = value

    async def attach_session(self, session_name: str) -> int:
        self._record("attach", session_name)
        self.attached.append(session_name)
        return self.attach_exit_code


@pytest.fixture
def fake_tmux() -> FakeTmuxService:
    """Empty in-memory tmux server."""
    return FakeTmuxService()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep user configuration and environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("RUN_NET_"):
            monkeypatch.delenv(key)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Drop handlers installed by setup_logging during a test."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
    logging.getLogger("libtmux").setLevel(logging.NOTSET)


@pytest.fixture
def make_config_dir(tmp_path):
    """Create a directory of node configuration files under the test cwd."""

    def _make(name: str, files: list[str]) -> Path:
        directory = tmp_path / name
        directory.mkdir()
        for file_name in files:
            (directory / file_name).write_text("interface if0 10.0.0.1/24\n")
        return directory

    return _make


@pytest.fixture
def make_tmux():
    """Factory for in-memory tmux servers with preset state."""
    return FakeTmuxService
