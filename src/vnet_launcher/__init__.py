"""vnet-launcher: start a virtual network of nodes in a tmux session."""

__version__ = "0.1.0"

from .core.launcher import Launcher
from .core.options import InvocationOptions

__all__ = ["Launcher", "InvocationOptions", "__version__"]
