"""Structured logging configuration for the narrative engine.

Log records are produced with structlog and rendered through the stdlib
``logging`` machinery to stderr, so they never interleave with the story
text written to stdout.

Verbosity levels:
- 0: WARNING (default)
- 1: INFO
- 2+: DEBUG
"""
from __future__ import annotations

import logging
import sys

import structlog

_PACKAGE_LOGGER = "nebula"

_configured = False


def configure_logging(verbosity: int = 0) -> None:
    """Configure the package logger and structlog processors.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG.
    """
    global _configured

    levels = {0: logging.WARNING, 1: logging.INFO}
    level = levels.get(verbosity, logging.DEBUG)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
        )
    )

    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structured logger, configuring logging on first use."""
    if not _configured:
        configure_logging()
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
