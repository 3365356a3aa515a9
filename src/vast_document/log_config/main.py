"""Logging configuration and utilities."""

import logging
from typing import Any

import structlog


def get_context_logger(name: str) -> structlog.BoundLogger:
    """Get a context-aware logger.

    Args:
        name: Logger name

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure structlog processors and the minimum log level.

    Args:
        level: Standard logging level name ("DEBUG", "INFO", ...)
        json: Render JSON lines instead of the console format
    """
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
    )


class DocumentContext:
    """Context manager binding document-level fields to every log line."""

    def __init__(self, **context: Any):
        """Initialize with context variables.

        Args:
            **context: Context key-value pairs
        """
        self.context = context

    def __enter__(self):
        """Enter context."""
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context."""
        structlog.contextvars.unbind_contextvars(*self.context.keys())


def set_document_context(**kwargs: Any) -> None:
    """Set document context in logging.

    Args:
        **kwargs: Context key-value pairs
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_document_context() -> None:
    """Drop every bound context variable."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "get_context_logger",
    "configure_logging",
    "DocumentContext",
    "set_document_context",
    "clear_document_context",
]
