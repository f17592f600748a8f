"""Structured logging setup shared by every module in the package."""

import logging

import structlog

from postop_radar.config import LoggingConfig


def configure_logging(config: LoggingConfig) -> None:
    """Configure stdlib logging and structlog from a `LoggingConfig`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, config.level))

    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
