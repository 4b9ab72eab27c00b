"""Middleware components for the flight seat map service."""

from .error_handler import ErrorHandlerMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "LoggingMiddleware"
]
