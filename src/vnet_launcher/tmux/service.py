"""
Tmux session management service.

This module wraps the tmux server with the handful of operations the launcher
needs: listing and killing sessions, creating a detached session, splitting
it into panes, titling and laying out those panes, and attaching the
invoking terminal.
"""

import asyncio
import shutil
from collections.abc import Callable

import libtmux
from libtmux.exc import LibTmuxException

from ..utils.logging import TmuxError
from .logging_utils import (
    log_session_attach,
    log_session_cleanup,
    log_session_list,
    log_session_operation,
    tmux_logger,
)

TMUX_BINARY = "tmux"


class TmuxService:
    """Client over a tmux server."""

    def __init__(self, server: libtmux.Server | None = None):
        """Initialize tmux service.

        Args:
            server: libtmux server to drive, the default socket if omitted
        """
        self._server = server if server is not None else libtmux.Server()
        tmux_logger.debug("Tmux service initialized")

    def is_available(self) -> bool:
        """Check whether the tmux binary can be found on PATH."""
        return shutil.which(TMUX_BINARY) is not None

    async def list_sessions(self) -> list[str]:
        """List the names of all sessions on the server.

        Returns:
            Session names in server order, empty when no server is running
        """
        try:
            names = [session.name for session in self._server.sessions]
        except LibTmuxException as e:
            # No server running means no sessions
            tmux_logger.debug(f"Could not list sessions: {e}")
            return []

        log_session_list(names)
        return names

    async def session_exists(self, session_name: str) -> bool:
        """Check if a tmux session exists.

        Args:
            session_name: Name of session to check

        Returns:
            True if session exists
        """
        return session_name in await self.list_sessions()

    async def kill_session(self, session_name: str) -> None:
        """Kill a tmux session.

        Args:
            session_name: Name of session to kill

        Raises:
            TmuxError: If tmux refuses to kill the session
        """
        try:
            self._server.kill_session(session_name)
        except LibTmuxException as e:
            log_session_operation("kill", session_name, "error", {"error": str(e)})
            raise TmuxError(
                f"Failed to kill session {session_name}: {e}", session_name
            ) from e

        log_session_operation("kill", session_name, "success")

    async def cleanup_sessions(
        self, prefix: str, on_kill: Callable[[str], None] | None = None
    ) -> list[str]:
        """Kill every session whose name starts with a prefix.

        Args:
            prefix: Session name prefix
            on_kill: Called with each session name as soon as it is killed

        Returns:
            Names of the killed sessions, in listing order
        """
        killed = []
        for session_name in await self.list_sessions():
            if session_name.startswith(prefix):
                await self.kill_session(session_name)
                killed.append(session_name)
                if on_kill:
                    on_kill(session_name)

        log_session_cleanup(prefix, killed)
        return killed

    async def create_session(
        self, session_name: str, command: str, start_directory: str | None = None
    ) -> None:
        """Create a detached session whose first pane runs a command.

        Args:
            session_name: Name of the new session
            command: Shell command for the initial pane
            start_directory: Working directory for the session's panes

        Raises:
            TmuxError: If the session exists or tmux fails to create it
        """
        if await self.session_exists(session_name):
            raise TmuxError(f"Session {session_name} already exists", session_name)

        log_session_operation("create", session_name, "starting")

        try:
            self._server.new_session(
                session_name=session_name,
                attach=False,
                start_directory=start_directory,
                window_command=command,
            )
        except LibTmuxException as e:
            log_session_operation("create", session_name, "error", {"error": str(e)})
            raise TmuxError(
                f"Failed to create session {session_name}: {e}", session_name
            ) from e

        log_session_operation("create", session_name, "success")

    async def split_window(self, session_name: str, command: str) -> None:
        """Add a pane running a command to the session's active window.

        The new pane becomes the session's active pane.
        """
        self._run(session_name, "split-window", "-t", session_name, command)

    async def set_pane_title(self, session_name: str, title: str) -> None:
        """Title the session's active pane."""
        self._run(session_name, "select-pane", "-t", session_name, "-T", title)

    async def select_layout(self, session_name: str, layout: str) -> None:
        """Apply a layout to the session's active window."""
        self._run(session_name, "select-layout", "-t", session_name, layout)

    async def set_option(self, session_name: str, option: str, value: str) -> None:
        """Set a session option."""
        self._run(session_name, "set-option", "-t", session_name, option, value)

    async def attach_session(self, session_name: str) -> int:
        """Attach the invoking terminal to a session.

        Blocks until the client detaches or the session ends.

        Args:
            session_name: Name of session to attach to

        Returns:
            Exit code of the tmux client, which reports its own errors

        Raises:
            TmuxError: If the client cannot be started
        """
        log_session_operation("attach", session_name, "starting")

        try:
            process = await asyncio.create_subprocess_exec(
                TMUX_BINARY, "attach-session", "-t", session_name
            )
        except OSError as e:
            raise TmuxError(
                f"Failed to attach to session {session_name}: {e}", session_name
            ) from e

        exit_code = await process.wait()
        log_session_attach(session_name, exit_code)
        return exit_code

    def _run(self, session_name: str, *args: str) -> None:
        """Run a raw tmux command, raising on anything written to stderr."""
        operation = args[0]
        try:
            result = self._server.cmd(*args)
        except LibTmuxException as e:
            log_session_operation(operation, session_name, "error", {"error": str(e)})
            raise TmuxError(f"tmux {operation} failed: {e}", session_name) from e

        if result.stderr:
            error = "\n".join(result.stderr)
            log_session_operation(operation, session_name, "error", {"error": error})
            raise TmuxError(f"tmux {operation} failed: {error}", session_name)

        log_session_operation(operation, session_name, "success")


# Global tmux service instance
_tmux_service: TmuxService | None = None


def get_tmux_service() -> TmuxService:
    """Get the global tmux service instance.

    Returns:
        TmuxService instance
    """
    global _tmux_service
    if _tmux_service is None:
        _tmux_service = TmuxService()
    return _tmux_service
