"""Logging utilities for tmux operations."""

from typing import Any

from ..utils.logging import LogContext, get_logger

tmux_logger = get_logger("vnet_launcher.tmux", LogContext.TMUX)


def log_session_operation(
    operation: str, session_name: str, status: str, context: dict[str, Any] | None = None
) -> None:
    """Log session operation."""
    message = f"Session {operation} {status} - {session_name}"
    if context:
        message += f" - {context}"

    if status == "error":
        tmux_logger.error(message, operation=operation)
    else:
        tmux_logger.info(message, operation=operation)


def log_session_attach(session_name: str, exit_code: int) -> None:
    """Log the end of an attached client."""
    tmux_logger.info(
        f"Session client exited - {session_name} (exit code: {exit_code})"
    )


def log_session_cleanup(prefix: str, killed: list[str]) -> None:
    """Log session cleanup."""
    if killed:
        tmux_logger.info(
            f"Sessions cleaned up - prefix: {prefix}, sessions: {killed}"
        )
    else:
        tmux_logger.debug(f"No sessions to clean up - prefix: {prefix}")


def log_session_list(sessions: list[str]) -> None:
    """Log session listing."""
    tmux_logger.debug(f"Sessions listed - count: {len(sessions)}")


def log_pane_added(session_name: str, title: str, command: str) -> None:
    """Log a new pane in a session."""
    tmux_logger.info(
        f"Pane added - {session_name} (title: {title})", command=command
    )
