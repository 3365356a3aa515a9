"""Logging configuration package."""

from .main import (
    DocumentContext,
    clear_document_context,
    configure_logging,
    get_context_logger,
    set_document_context,
)


__all__ = [
    "get_context_logger",
    "configure_logging",
    "DocumentContext",
    "set_document_context",
    "clear_document_context",
]
