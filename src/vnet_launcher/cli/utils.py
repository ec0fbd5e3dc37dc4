"""CLI utilities for error handling and common functionality."""

import sys
from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from ..utils.logging import LogContext, VnetLauncherException, get_logger

cli_logger = get_logger("vnet_launcher.cli", LogContext.CLI)


def error_handler(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator for handling CLI errors."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except VnetLauncherException as e:
            cli_logger.error(e.message, error_context=e.context)
            click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
            sys.exit(1)
        except Exception as e:
            cli_logger.error("Unexpected error", exception=e)
            click.echo(click.style(f"Unexpected error: {e}", fg="red"), err=True)
            sys.exit(1)

    return wrapper


def usage_exit(ctx: click.Context, exit_code: int = 1) -> None:
    """Print usage text on stdout and exit."""
    click.echo(ctx.get_help())
    sys.exit(exit_code)
