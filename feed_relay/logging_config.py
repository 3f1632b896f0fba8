"""Structured logging setup for the feed relay."""
import logging

import structlog


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Configure structlog for the process.

    Args:
        log_level: Minimum level to emit (DEBUG, INFO, WARNING, ERROR)
        log_format: ``json`` for one JSON object per line, ``console`` for humans
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
