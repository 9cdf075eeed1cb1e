"""Structured logging for mocksocket.

mocksocket stands in for a real network, so its logs are the only trace of
what the simulated connections did. Negotiation failures are logged the way a
browser reports a failed WebSocket handshake; lifecycle transitions are
logged at debug level.

mocksocket runs inside someone else's test suite, so it leaves the global
structlog configuration, the root logger and the caller's context variables
alone. Its loggers carry their own processor chain and write through the
``mocksocket`` stdlib logger, which is the only logger configured here:
- JSON renderer for machine-readable test output
- Console renderer with colors for development
- Timestamp, level, logger name and service name on every entry

Environment Variables:
    MOCKSOCKET_LOG_FORMAT: Set to "json" for JSON output, "console" for colored output
    MOCKSOCKET_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR)
    MOCKSOCKET_SERVICE_NAME: Service name to include in logs
    MOCKSOCKET_DEBUG: Set to "true" or "1" to log message payloads unredacted

Example:
    >>> from mocksocket.observability.logging import get_logger, configure_logging
    >>>
    >>> configure_logging(log_format="json", log_level="DEBUG")
    >>> logger = get_logger("mocksocket.websocket")
    >>> logger.error("mocksocket.websocket.connection_failed", url="ws://localhost/")
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

PACKAGE_LOGGER_NAME = "mocksocket"

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_SERVICE_NAME = "mocksocket"

ENV_LOG_FORMAT = "MOCKSOCKET_LOG_FORMAT"
ENV_LOG_LEVEL = "MOCKSOCKET_LOG_LEVEL"
ENV_SERVICE_NAME = "MOCKSOCKET_SERVICE_NAME"
ENV_DEBUG = "MOCKSOCKET_DEBUG"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Key substrings (case-insensitive) that indicate sensitive data to redact
_SENSITIVE_KEY_PATTERNS = frozenset({"password", "token", "secret", "key", "authorization", "auth"})

_logging_configured = False
_service_name = DEFAULT_SERVICE_NAME


def _is_sensitive_key(key: str) -> bool:
    lower = key.lower()
    return any(pattern in lower for pattern in _SENSITIVE_KEY_PATTERNS)


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values replaced by REDACTED_PLACEHOLDER.

    Keys containing password, token, secret, key, authorization or auth
    (case-insensitive) are redacted, in nested dicts and lists of dicts too.

    Example:
        >>> sanitize_for_logging({"user": "alice", "password": "secret123"})
        {'user': 'alice', 'password': '***REDACTED***'}
    """
    result: dict[str, Any] = {}
    for k, v in data.items():
        if _is_sensitive_key(k):
            result[k] = REDACTED_PLACEHOLDER
        elif isinstance(v, dict):
            result[k] = sanitize_for_logging(v)
        elif isinstance(v, list):
            result[k] = [
                sanitize_for_logging(item) if isinstance(item, dict) else item for item in v
            ]
        else:
            result[k] = v
    return result


def describe_payload(data: Any) -> Any:
    """Return a log-safe description of a message payload.

    In debug mode dict payloads are sanitized and everything else is returned
    as-is. Otherwise only the payload type and size are logged.
    """
    if is_debug_mode():
        return sanitize_for_logging(data) if isinstance(data, dict) else data
    size = len(data) if isinstance(data, (str, bytes, bytearray)) else None
    return {"type": type(data).__name__, "size": size}


def is_debug_mode() -> bool:
    """Return True if MOCKSOCKET_DEBUG is set to a truthy value (e.g. true, 1)."""
    value = os.environ.get(ENV_DEBUG, "").strip().lower()
    return value in ("true", "1", "yes", "on")


def _add_service_name(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", _service_name)
    return event_dict


def _get_shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Configure the handler, level and service name of the ``mocksocket`` logger.

    Args:
        log_format: "json" or "console". Defaults to env var or "console"
        log_level: Minimum log level. Defaults to env var or "WARNING"
        service_name: Service name added to every entry. Defaults to env var or "mocksocket"
        force: If True, reconfigure even if already configured
    """
    global _logging_configured, _service_name

    if _logging_configured and not force:
        return

    log_format = (log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)).lower()
    log_level = (log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    _service_name = service_name or os.environ.get(ENV_SERVICE_NAME, DEFAULT_SERVICE_NAME)

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_get_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, log_level))

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger writing through the stdlib logger ``name``.

    Configures the ``mocksocket`` logger with default settings on first use.
    The returned logger carries its own processors, so the global structlog
    configuration does not apply to it.

    Args:
        name: Logger name (typically __name__ of a mocksocket module)
    """
    if not _logging_configured:
        configure_logging()

    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            *_get_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )
