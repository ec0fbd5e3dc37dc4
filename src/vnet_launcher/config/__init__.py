"""Configuration management module."""

from .loader import LauncherConfig, find_config_file, load_config

__all__ = ["LauncherConfig", "load_config", "find_config_file"]
