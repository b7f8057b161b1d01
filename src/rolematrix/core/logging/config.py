"""structlog configuration shared by the API and the CLI."""

import logging
import sys
from typing import TextIO

import structlog

from rolematrix.config import Settings, get_settings


def configure_logging(
    settings: Settings | None = None,
    file: TextIO | None = None,
) -> None:
    """Configure structlog processors and level filtering.

    Production renders JSON lines; every other environment uses the
    console renderer.

    Args:
        settings: Settings to read the environment and level from
        file: Stream to write to, stdout when omitted
    """
    settings = settings or get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.is_production
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file or sys.stdout),
        cache_logger_on_first_use=False,
    )
