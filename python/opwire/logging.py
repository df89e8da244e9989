"""Structured logging for opwire.

This module provides structured logging functions with the same
``log_<level>(message, fields)`` surface across the package. Records go
through structlog, bound to the ``opwire`` logger, and end up in the
standard library logging tree once :func:`configure_logging` has run.

Example:
    >>> from opwire.logging import configure_logging, log_info, log_error
    >>>
    >>> configure_logging(level="debug")
    >>> log_info("Invoking operation", {
    ...     "service": "Accounts",
    ...     "operation": "lookup"
    ... })
    >>>
    >>> try:
    ...     process()
    ... except Exception as e:
    ...     log_error(f"Processing failed: {e}", {
    ...         "operation": "lookup",
    ...         "error_type": type(e).__name__
    ...     })
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from .types import LogContext

LOGGER_NAME = "opwire"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_logger = structlog.get_logger(LOGGER_NAME)


def configure_logging(level: str = "info", *, json_output: bool = False) -> None:
    """Configure structlog processors and output routing.

    Args:
        level: One of trace, debug, info, warn, error.
        json_output: Use JSON renderer instead of console renderer.

    Raises:
        ValueError: If the level name is unknown.
    """
    try:
        log_level = _LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields.

    Use this for failures that surface to the caller as server errors.

    Args:
        message: The log message.
        fields: Optional structured fields for context. Can be a dict
                or a LogContext instance.

    Example:
        >>> log_error("Operation raised", {
        ...     "operation": "lookup",
        ...     "error_type": "KeyError"
        ... })
    """
    _logger.error(message, **_normalize_fields(fields))


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Use this for rejected requests and misbehaving collaborators.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _logger.warning(message, **_normalize_fields(fields))


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields.

    Use this for invocations and gateway requests.

    Args:
        message: The log message.
        fields: Optional structured fields for context.

    Example:
        >>> log_info("Invoking lookup", {"service": "Accounts"})
    """
    _logger.info(message, **_normalize_fields(fields))


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields.

    Use this for parameter maps and resolution details.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _logger.debug(message, **_normalize_fields(fields))


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    Trace has no stdlib level of its own; it is emitted at DEBUG with
    ``trace=true`` so it can be filtered.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _logger.debug(message, trace="true", **_normalize_fields(fields))


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, str]:
    """Normalize fields to a dict of strings.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict with string values, empty if no fields.
    """
    if fields is None:
        return {}

    if isinstance(fields, LogContext):
        # Convert LogContext to dict, excluding None values
        return {k: str(v) for k, v in fields.model_dump().items() if v is not None}

    return {k: str(v) for k, v in fields.items() if v is not None}


__all__ = [
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
