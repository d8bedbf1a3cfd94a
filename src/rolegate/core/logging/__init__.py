"""Logging module with structured logging and request tracking."""

from rolegate.core.logging.middleware import RequestIdMiddleware, RequestLoggingMiddleware
from rolegate.core.logging.setup import configure_logging


__all__ = [
    "RequestIdMiddleware",
    "RequestLoggingMiddleware",
    "configure_logging",
]
