"""
nextasset - structlog configuration.

Centralised structlog setup for structured logging (JSON or console).

Usage:
    from nextasset.config.logging import configure_logging

    # At application start-up
    configure_logging()

    # In modules
    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("event_name", key=value)

Logs are written to stderr so CLI reports on stdout stay machine-readable.
"""

import logging
import os
import sys

import structlog
from structlog.types import EventDict, WrappedLogger

APP_NAME = "nextasset"


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add application context to every log entry.

    Adds:
    - app: "nextasset"
    - environment: value of NEXTASSET_ENV (default "development")
    """
    event_dict["app"] = APP_NAME
    event_dict["environment"] = os.getenv("NEXTASSET_ENV", "development")
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    enable_colors: bool = False,
) -> None:
    """
    Configure structlog for nextasset.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, JSON logs. If False, human-readable console logs
        enable_colors: If True, colourise console logs (interactive use only)

    Example:
        >>> configure_logging(level="DEBUG", json_format=False, enable_colors=True)
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )

    processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=enable_colors))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def configure_from_env() -> None:
    """Configure logging from LOG_LEVEL / LOG_FORMAT environment variables."""
    log_level = os.getenv("LOG_LEVEL", "WARNING")
    json_logs = os.getenv("LOG_FORMAT", "console") == "json"
    configure_logging(level=log_level, json_format=json_logs, enable_colors=False)
