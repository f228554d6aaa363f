"""Observability module for the page server."""

from jsonpage.observability.logging import (
    JSONFormatter,
    ContextLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "JSONFormatter",
    "ContextLogger",
    "configure_logging",
    "get_logger",
]
