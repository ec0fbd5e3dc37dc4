"""
Tmux session management for the virtual network launcher.

This package provides the tmux client the launcher drives:
- Session listing, creation and cleanup
- Pane splitting, titling and layout
- Attaching the invoking terminal
"""

from ..utils.logging import TmuxError
from .service import TmuxService, get_tmux_service

__all__ = [
    "TmuxError",
    "TmuxService",
    "get_tmux_service",
]
