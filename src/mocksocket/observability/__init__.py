"""Observability module for mocksocket.

This module provides structured logging for simulated connections.

Example:
    >>> from mocksocket.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.debug("mocksocket.websocket.open", url="ws://localhost/")
"""

from mocksocket.observability.logging import (
    configure_logging,
    describe_payload,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
)

__all__ = [
    "configure_logging",
    "describe_payload",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
]
