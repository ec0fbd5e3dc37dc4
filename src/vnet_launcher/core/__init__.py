"""Core launcher functionality."""

from .launcher import Launcher, LaunchPlan, PaneSpec
from .options import InvocationOptions

__all__ = ["Launcher", "LaunchPlan", "PaneSpec", "InvocationOptions"]
