"""Structured logging configuration using structlog."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.types import Processor

# Configure once flag
_configured = False


def _configure_structlog(level: str | None = None, log_file: str | None = None, force: bool = False) -> None:
    """Configure structlog for the application."""
    global _configured
    if _configured and not force:
        return

    # Explicit arguments win over the environment
    log_level_str = (level or os.environ.get("SKELGEN_LOG_LEVEL", "WARNING")).upper()
    log_level = getattr(logging, log_level_str, logging.WARNING)
    log_file = log_file or os.environ.get("SKELGEN_LOG_FILE")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Console handler (stderr), stdout is reserved for generator output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)

    # Colored console output on a terminal, JSON lines otherwise
    is_development = sys.stderr.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if is_development:
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)
        **initial_context: Initial context values to bind to the logger

    Returns:
        Bound structlog logger

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("mock_registered", target="App\\\\Repository\\\\UserRepository")
    """
    _configure_structlog()

    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)

    if initial_context:
        logger = logger.bind(**initial_context)

    return logger


def bind_context(**context: Any) -> None:
    """
    Bind context variables that will be included in all log messages.

    Used to tag every event emitted while one class is being generated.

    Args:
        **context: Key-value pairs to bind to the context
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def configure_logging(level: str | None = None, log_file: str | None = None) -> None:
    """
    Configure structured logging for the application.

    Replaces the handlers installed by an earlier call, so the CLI can apply
    the level and log file read from its settings.

    Args:
        level: Log level name, defaults to SKELGEN_LOG_LEVEL or WARNING
        log_file: Optional path of a rotating JSON log file
    """
    _configure_structlog(level, log_file, force=True)


__all__ = ["get_logger", "bind_context", "clear_context", "configure_logging"]
