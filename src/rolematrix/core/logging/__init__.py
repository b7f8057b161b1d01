"""Logging module with structured logging and request tracking."""

from rolematrix.core.logging.config import configure_logging
from rolematrix.core.logging.middleware import (
    RequestIdMiddleware,
    RequestLoggingMiddleware,
)


__all__ = [
    "RequestIdMiddleware",
    "RequestLoggingMiddleware",
    "configure_logging",
]
