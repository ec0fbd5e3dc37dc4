"""Configuration loading and management."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..utils.logging import ConfigurationError, LogContext, LogLevel, get_logger

logger = get_logger(__name__, LogContext.CONFIG)

ENV_PREFIX = "RUN_NET_"
CONFIG_PATH_ENV = f"{ENV_PREFIX}CONFIG"


class LauncherConfig(BaseModel):
    """Configuration model for the virtual network launcher."""

    # Session naming
    session_prefix: str = Field(
        default="vnet-", description="Prefix of every launcher-managed session"
    )

    # Node configuration discovery
    config_suffix: str = Field(
        default=".lnx", description="Suffix of node configuration files"
    )

    # Pane command
    debug_env: str = Field(
        default="RUST_LOG=info",
        description="Environment assignment prepended to node commands with --debug",
    )
    fallback_shell: str = Field(
        default="bash", description="Shell that takes over a pane once its node exits"
    )

    # tmux presentation
    layout: str = Field(default="tiled", description="Layout re-applied after each split")
    pane_border_status: str = Field(
        default="top", description="Position of the pane title bar"
    )
    pane_border_format: str = Field(
        default="#{pane_index}: #{pane_title}",
        description="Format of the pane title bar",
    )

    # Logging
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")
    log_file: str | None = Field(default=None, description="Log file path")
    structured_logs: bool = Field(
        default=False, description="Emit JSON log lines instead of plain text"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept level names in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


def find_config_file(custom_path: str | None = None) -> Path | None:
    """Find configuration file in standard locations."""
    custom_path = custom_path or os.environ.get(CONFIG_PATH_ENV)
    if custom_path:
        path = Path(custom_path).expanduser()
        if path.exists():
            return path
        raise ConfigurationError(
            f"Config file not found: {custom_path}", context={"path": custom_path}
        )

    search_paths = [
        Path.cwd() / "run-net.yaml",
        Path.cwd() / "run-net.yml",
        Path.home() / ".config" / "run-net" / "config.yaml",
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping at the top level"
        )
    return data


def load_env_vars() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    for config_key in LauncherConfig.model_fields:
        env_var = f"{ENV_PREFIX}{config_key.upper()}"
        if env_var in os.environ:
            env_value = os.environ[env_var]
            if config_key == "structured_logs":
                config[config_key] = env_value.lower() in ("true", "1", "yes", "on")
            else:
                config[config_key] = env_value

    return config


def load_config(
    config_path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> LauncherConfig:
    """Load configuration from file and environment variables.

    Precedence order (highest to lowest):
    1. Explicit overrides
    2. Environment variables
    3. Configuration file
    4. Default values
    """
    config_data: dict[str, Any] = {}

    config_file = find_config_file(config_path)
    if config_file:
        logger.debug("Loading configuration file", path=str(config_file))
        config_data.update(load_config_file(config_file))

    config_data.update(load_env_vars())

    if overrides:
        config_data.update(overrides)

    try:
        return LauncherConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
