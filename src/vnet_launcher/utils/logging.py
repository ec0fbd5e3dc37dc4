"""
Logging and error handling framework for the virtual network launcher.

This module provides:
- Structured logging configuration
- Custom exception classes
- Context-aware logging utilities
- Audit logging
"""

import functools
import json
import logging
import sys
import traceback
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogContext(str, Enum):
    """Log context categories for structured logging."""

    LAUNCHER = "launcher"
    CLI = "cli"
    TMUX = "tmux"
    CONFIG = "config"


class VnetLauncherException(Exception):
    """Base exception class for all launcher errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)


class ConfigurationError(VnetLauncherException):
    """Errors related to launcher configuration."""

    pass


class ConfigDirNotFoundError(VnetLauncherException):
    """The node configuration directory does not exist."""

    pass


class NoConfigFilesFoundError(VnetLauncherException):
    """The node configuration directory holds no configuration files."""

    pass


class TmuxError(VnetLauncherException):
    """Errors related to tmux session management."""

    def __init__(
        self,
        message: str,
        session_name: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context)
        self.session_name = session_name


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    _standard_fields = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "context",
        "session_name",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "context"):
            log_data["context"] = record.context

        if getattr(record, "session_name", None):
            log_data["session_name"] = record.session_name

        # Remaining extra fields passed through the contextual logger
        for key, value in record.__dict__.items():
            if key not in self._standard_fields and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data, default=str)


class ContextualLogger:
    """Logger with context management for structured logging."""

    def __init__(self, name: str, context: LogContext):
        self.logger = logging.getLogger(name)
        self.context = context.value
        self.session_name: str | None = None

    def set_session_name(self, session_name: str) -> None:
        """Set the tmux session name for all subsequent log messages."""
        self.session_name = session_name

    def _log(
        self, level: int, message: str, extra_context: dict[str, Any] | None = None
    ) -> None:
        """Internal logging method with context injection."""
        extra: dict[str, Any] = {"context": self.context}

        if self.session_name:
            extra["session_name"] = self.session_name

        if extra_context:
            extra.update(extra_context)

        self.logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, exception: Exception | None = None, **kwargs) -> None:
        """Log error message with context and optional exception."""
        if exception:
            self.logger.error(
                message,
                exc_info=exception,
                extra={
                    "context": self.context,
                    "session_name": self.session_name,
                    **kwargs,
                },
            )
        else:
            self._log(logging.ERROR, message, kwargs)


def get_logger(name: str, context: LogContext) -> ContextualLogger:
    """Get a contextual logger instance."""
    return ContextualLogger(name, context)


def setup_logging(
    log_level: str | LogLevel = LogLevel.WARNING,
    log_file: Path | None = None,
    enable_structured: bool = False,
    enable_console: bool = True,
) -> None:
    """
    Setup logging configuration.

    Console output goes to stderr so it never mixes with usage text or
    the session reports printed on stdout.

    Args:
        log_level: Minimum log level to capture
        log_file: Optional file path for log output
        enable_structured: Use JSON structured logging format
        enable_console: Enable console output
    """
    if isinstance(log_level, LogLevel):
        log_level = log_level.value

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    def _formatter() -> logging.Formatter:
        if enable_structured:
            return StructuredFormatter()
        return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handlers: list[logging.Handler] = []

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(_formatter())
        handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(_formatter())
        handlers.append(file_handler)

    root_logger = logging.getLogger()

    # Clear existing handlers first
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    # libtmux logs every command it runs at DEBUG
    logging.getLogger("libtmux").setLevel(logging.WARNING)


def audit_log(action: str, log_context: LogContext = LogContext.LAUNCHER):
    """Decorator for audit logging of coroutine operations."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(f"{func.__module__}.audit", log_context)

            logger.info(
                f"Audit: {action} started",
                action=action,
                function=func.__name__,
            )

            try:
                result = await func(*args, **kwargs)

                logger.info(
                    f"Audit: {action} completed successfully",
                    action=action,
                    function=func.__name__,
                    status="success",
                )

                return result

            except Exception as e:
                logger.error(
                    f"Audit: {action} failed",
                    action=action,
                    function=func.__name__,
                    status="error",
                    error=str(e),
                )

                raise

        return wrapper

    return decorator
