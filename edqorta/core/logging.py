"""Structured logging setup."""

import logging

import structlog


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Route structlog through the stdlib root logger.

    Args:
        level: Minimum level name, e.g. "INFO"
        fmt: "json" for machine-readable lines, "text" for the dev console
    """
    logging.basicConfig(format="%(message)s", level=level.upper())

    renderer = (
        structlog.processors.JSONRenderer() if fmt == "json" else structlog.dev.ConsoleRenderer()
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
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
