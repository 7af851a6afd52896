"""Structured logging configuration using structlog.

This provides JSON-formatted logs suitable for production environments
and pretty console output for development.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add service identity to log entries.

    Args:
        logger: Logger instance
        method_name: Method being called
        event_dict: Event dictionary

    Returns:
        EventDict: Updated event dictionary with service context
    """
    from .settings import get_settings

    settings = get_settings()
    event_dict.setdefault("service_name", settings.service_name)
    event_dict.setdefault("service_version", settings.service_version)
    event_dict.setdefault("environment", settings.environment.value)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    include_context: bool = True,
    cache_logger_on_first_use: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON logs; otherwise use console format
        include_context: If True, add service context to all logs
        cache_logger_on_first_use: If True, loggers freeze their configuration on first use

    Example:
        >>> configure_logging(log_level="DEBUG", json_logs=False)
        >>> import structlog
        >>> logger = structlog.get_logger()
        >>> logger.info("application_started")
    """
    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    # Build processor chain
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_context:
        processors.append(add_app_context)

    # Add format processor
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=cache_logger_on_first_use,
    )


def configure_logging_from_settings() -> None:
    """Configure logging from the cached application settings."""
    from .settings import get_settings

    settings = get_settings()
    configure_logging(
        log_level=settings.log_level.value,
        json_logs=settings.is_production,
        include_context=True,
        cache_logger_on_first_use=not settings.is_testing,
    )


__all__ = ["add_app_context", "configure_logging", "configure_logging_from_settings"]
