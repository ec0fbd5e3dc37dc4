"""
Virtual network launcher.

Turns a directory of node configuration files into a tmux session with one
titled pane per node, each running the node binary against its file and
falling back to an interactive shell once the node exits.
"""

import os
import shlex
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ..config import LauncherConfig
from ..tmux import TmuxService
from ..tmux.logging_utils import log_pane_added
from ..utils.logging import (
    ConfigDirNotFoundError,
    LogContext,
    NoConfigFilesFoundError,
    TmuxError,
    audit_log,
    get_logger,
)
from .options import InvocationOptions

logger = get_logger(__name__, LogContext.LAUNCHER)

# tmux rewrites these characters in session names
_SESSION_NAME_TRANSLATION = str.maketrans({".": "_", ":": "_"})

_INTERRUPT_GUARD = "trap : INT"


@dataclass
class PaneSpec:
    """A single node pane."""

    title: str
    config_file: str
    command: str


@dataclass
class LaunchPlan:
    """Everything needed to build a session, computed before touching tmux."""

    session_name: str
    working_directory: str
    panes: list[PaneSpec] = field(default_factory=list)


class Launcher:
    """Builds and attaches the virtual network session."""

    def __init__(
        self,
        tmux_service: TmuxService,
        config: LauncherConfig | None = None,
        report: Callable[[str], None] | None = None,
    ):
        """Initialize launcher.

        Args:
            tmux_service: tmux client used for every session operation
            config: Launcher configuration, defaults when omitted
            report: Receives user-facing progress lines
        """
        self.tmux = tmux_service
        self.config = config or LauncherConfig()
        self.report = report or (lambda message: logger.info(message))

    async def clean_sessions(self) -> list[str]:
        """Kill every session carrying the launcher prefix.

        Returns:
            Names of the killed sessions
        """
        prefix = self.config.session_prefix.translate(_SESSION_NAME_TRANSLATION)
        return await self.tmux.cleanup_sessions(
            prefix, on_kill=lambda name: self.report(f"Killed session {name}")
        )

    def session_name_for(self, config_dir: str) -> str:
        """Derive the session name from the configuration directory."""
        base_name = os.path.basename(os.path.abspath(config_dir))
        return f"{self.config.session_prefix}{base_name}".translate(
            _SESSION_NAME_TRANSLATION
        )

    def discover_config_files(self, config_dir: str) -> list[str]:
        """List the node configuration files in a directory, sorted by name.

        Raises:
            ConfigDirNotFoundError: If the directory does not exist
            NoConfigFilesFoundError: If no file carries the configuration suffix
        """
        suffix = self.config.config_suffix
        directory = Path(config_dir)
        if not directory.is_dir():
            raise ConfigDirNotFoundError(
                f"Configuration directory not found: {config_dir}",
                context={"config_dir": config_dir},
            )

        names = sorted(
            entry.name
            for entry in directory.iterdir()
            if entry.is_file()
            and entry.name.endswith(suffix)
            and not entry.name.startswith(".")
        )
        if not names:
            raise NoConfigFilesFoundError(
                f"No *{suffix} files found in {config_dir}",
                context={"config_dir": config_dir, "suffix": suffix},
            )

        return [os.path.join(config_dir, name) for name in names]

    def pane_title(self, config_file: str) -> str:
        """Title for a pane: the file's base name without the suffix."""
        name = os.path.basename(config_file)
        suffix = self.config.config_suffix
        if suffix and name.endswith(suffix):
            name = name[: -len(suffix)]
        return name

    def pane_command(self, options: InvocationOptions, config_file: str) -> str:
        """Shell command run in a node pane."""
        argv = [options.node_path, *options.extra_args, config_file]
        node_command = " ".join(shlex.quote(arg) for arg in argv)
        if options.debug:
            node_command = f"{self.config.debug_env} {node_command}"
        # Only the wrapping shell ignores Ctrl-C; the node is still interrupted
        return f"{_INTERRUPT_GUARD}; {node_command}; exec {self.config.fallback_shell}"

    def build_plan(self, options: InvocationOptions) -> LaunchPlan:
        """Compute the session name and pane specs for an invocation."""
        config_files = self.discover_config_files(options.config_dir)
        plan = LaunchPlan(
            session_name=self.session_name_for(options.config_dir),
            working_directory=os.getcwd(),
        )
        for config_file in config_files:
            plan.panes.append(
                PaneSpec(
                    title=self.pane_title(config_file),
                    config_file=config_file,
                    command=self.pane_command(options, config_file),
                )
            )

        logger.debug(
            "Launch plan built",
            session_name=plan.session_name,
            pane_count=len(plan.panes),
        )
        return plan

    async def build_session(self, plan: LaunchPlan) -> None:
        """Create the session and one pane per node.

        The first failing tmux call aborts; panes already created are kept.
        """
        session_name = plan.session_name
        primary, *secondary = plan.panes

        await self.tmux.create_session(
            session_name, primary.command, start_directory=plan.working_directory
        )
        await self.tmux.set_pane_title(session_name, primary.title)
        log_pane_added(session_name, primary.title, primary.command)

        await self.tmux.set_option(
            session_name, "pane-border-status", self.config.pane_border_status
        )
        await self.tmux.set_option(
            session_name, "pane-border-format", self.config.pane_border_format
        )

        for pane in secondary:
            await self.tmux.split_window(session_name, pane.command)
            await self.tmux.set_pane_title(session_name, pane.title)
            # Re-tile so the next split always has room
            await self.tmux.select_layout(session_name, self.config.layout)
            log_pane_added(session_name, pane.title, pane.command)

    @audit_log("launch", LogContext.LAUNCHER)
    async def launch(self, options: InvocationOptions) -> int:
        """Run a full invocation: clean, build the session, attach.

        Returns:
            Exit code of the attached tmux client
        """
        if not self.tmux.is_available():
            raise TmuxError("tmux executable not found on PATH")

        if options.clean:
            await self.clean_sessions()

        plan = self.build_plan(options)
        logger.set_session_name(plan.session_name)
        logger.info(
            "Launching virtual network",
            node_path=options.node_path,
            config_dir=options.config_dir,
            pane_count=len(plan.panes),
        )

        await self.build_session(plan)
        return await self.tmux.attach_session(plan.session_name)
