"""mocksocket Error Taxonomy.

This module defines the error hierarchy for mocksocket. Every error carries
a ``mocksocket:<area>/<reason>`` code and a details dict. Errors that mirror a
browser WebSocket exception also derive from the matching builtin, so callers
can catch either ``InvalidURLError`` or ``SyntaxError``.
"""
from __future__ import annotations

from typing import Any


class MockSocketError(Exception):
    """Base exception for all mocksocket errors.

    Attributes:
        code: Error code following the mocksocket:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidURLError(MockSocketError, SyntaxError):
    """Raised when a WebSocket or Server URL is missing or malformed.

    Attributes:
        url: The rejected URL (as given)
        reason: Why the URL was rejected
    """

    def __init__(self, url: Any, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="mocksocket:constructor/invalid_url",
            message=reason,
            details={"url": str(url), **(details or {})},
        )
        self.url = url
        self.reason = reason


class InvalidProtocolError(MockSocketError, SyntaxError):
    """Raised when a requested sub-protocol is malformed or duplicated.

    Attributes:
        protocol: The offending sub-protocol value
        reason: Why it was rejected
    """

    def __init__(self, protocol: Any, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="mocksocket:constructor/invalid_protocol",
            message=reason,
            details={"protocol": str(protocol), **(details or {})},
        )
        self.protocol = protocol
        self.reason = reason


class InvalidCloseCodeError(MockSocketError, TypeError):
    """Raised when ``close()`` receives a code outside 1000 or 3000-4999.

    Attributes:
        close_code: The rejected close code
    """

    def __init__(
        self, close_code: Any, message: str, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            code="mocksocket:close/invalid_code",
            message=message,
            details={"close_code": close_code, **(details or {})},
        )
        self.close_code = close_code


class CloseReasonTooLongError(MockSocketError, SyntaxError):
    """Raised when a close reason exceeds the byte limit once UTF-8 encoded.

    Attributes:
        byte_length: Encoded length of the rejected reason
        max_bytes: The limit that was exceeded
    """

    def __init__(
        self, byte_length: int, max_bytes: int, message: str, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            code="mocksocket:close/reason_too_long",
            message=message,
            details={"byte_length": byte_length, "max_bytes": max_bytes, **(details or {})},
        )
        self.byte_length = byte_length
        self.max_bytes = max_bytes


class InvalidStateError(MockSocketError):
    """Raised when an operation is not permitted in the socket's current ready state.

    Attributes:
        ready_state: Name of the state the socket was in
    """

    def __init__(
        self, ready_state: str, message: str, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            code="mocksocket:socket/invalid_state",
            message=message,
            details={"ready_state": ready_state, **(details or {})},
        )
        self.ready_state = ready_state


class InvalidTransitionError(MockSocketError):
    """Raised when attempting a ready-state transition the lifecycle forbids.

    Attributes:
        from_state: The current ready state
        to_state: The attempted target state
    """

    def __init__(
        self, from_state: str, to_state: str, details: dict[str, Any] | None = None
    ) -> None:
        message = f"Invalid transition from '{from_state}' to '{to_state}'"
        super().__init__(
            code="mocksocket:socket/invalid_transition",
            message=message,
            details={"from_state": from_state, "to_state": to_state, **(details or {})},
        )
        self.from_state = from_state
        self.to_state = to_state


class AddressInUseError(MockSocketError):
    """Raised when a mock server is already listening on a URL."""

    def __init__(self, url: str, details: dict[str, Any] | None = None) -> None:
        message = f"A mock server is already listening on this url: {url}"
        super().__init__(
            code="mocksocket:server/address_in_use",
            message=message,
            details={"url": url, **(details or {})},
        )
        self.url = url


class SchedulerError(MockSocketError):
    """Raised when deferred work cannot be scheduled or never settles."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="mocksocket:scheduler/error",
            message=message,
            details=details or {},
        )
