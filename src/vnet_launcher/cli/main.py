"""Main CLI entry point for run_net."""

import asyncio
import sys
from pathlib import Path

import click

from ..config import load_config
from ..core import InvocationOptions, Launcher
from ..tmux import get_tmux_service
from ..utils.logging import setup_logging
from .utils import error_handler, usage_exit

# Flags may sit anywhere; every other token, unknown options included,
# is a positional forwarded verbatim.
CONTEXT_SETTINGS = {
    "help_option_names": [],
    "ignore_unknown_options": True,
    "allow_interspersed_args": True,
}


@click.command(
    name="run_net",
    context_settings=CONTEXT_SETTINGS,
    options_metavar="[--clean] [--debug] [--help]",
)
@click.option(
    "--clean",
    is_flag=True,
    help="Kill every existing virtual network session before starting.",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Run each node with informational logging enabled.",
)
@click.option("--help", "show_help", is_flag=True, help="Show this message and exit.")
@click.argument(
    "args",
    nargs=-1,
    type=click.UNPROCESSED,
    metavar="NODE_BINARY CONFIG_DIR [EXTRA_ARGS]...",
)
@click.pass_context
@error_handler
def main(
    ctx: click.Context,
    clean: bool,
    debug: bool,
    show_help: bool,
    args: tuple[str, ...],
) -> None:
    """Launch a virtual network: one tmux pane per node configuration file.

    Every *.lnx file in CONFIG_DIR gets a pane in the session
    vnet-<CONFIG_DIR name> running NODE_BINARY EXTRA_ARGS... FILE.
    When a node exits its pane drops to an interactive shell.

    Detach with 'Ctrl+b d'.
    """
    if show_help:
        usage_exit(ctx)

    try:
        options = InvocationOptions.from_positionals(args, clean=clean, debug=debug)
    except ValueError:
        usage_exit(ctx)

    config = load_config()
    setup_logging(
        log_level=config.log_level,
        log_file=Path(config.log_file).expanduser() if config.log_file else None,
        enable_structured=config.structured_logs,
    )

    launcher = Launcher(get_tmux_service(), config, report=click.echo)
    exit_code = asyncio.run(launcher.launch(options))
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
