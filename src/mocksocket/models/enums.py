"""Enumerations for mocksocket.

This module defines the enum types used across the package to prevent
magic numbers in the connection lifecycle.
"""

from enum import IntEnum


class ReadyState(IntEnum):
    """Connection lifecycle states, numbered as in the WebSocket API.

    CLOSED is the only terminal state.

    Example:
        >>> ReadyState.OPEN == 1
        True
        >>> ReadyState.CLOSED.is_terminal()
        True
    """

    CONNECTING = 0
    OPEN = 1
    CLOSING = 2
    CLOSED = 3

    def is_terminal(self) -> bool:
        """Check if this state represents the end of the lifecycle."""
        return self is ReadyState.CLOSED

    def is_closing_or_closed(self) -> bool:
        """Check if the close handshake has started or finished."""
        return self in (ReadyState.CLOSING, ReadyState.CLOSED)


class CloseCode(IntEnum):
    """Registered WebSocket close status codes.

    Only CLOSE_NORMAL and the 3000-4999 application range may be passed to
    WebSocket.close(); the rest are reported by the mock on its own.
    """

    CLOSE_NORMAL = 1000
    CLOSE_GOING_AWAY = 1001
    CLOSE_PROTOCOL_ERROR = 1002
    CLOSE_UNSUPPORTED = 1003
    CLOSE_NO_STATUS = 1005
    CLOSE_ABNORMAL = 1006
    UNSUPPORTED_DATA = 1007
    POLICY_VIOLATION = 1008
    CLOSE_TOO_LARGE = 1009
    MISSING_EXTENSION = 1010
    INTERNAL_ERROR = 1011
    SERVICE_RESTART = 1012
    TRY_AGAIN_LATER = 1013
    TLS_HANDSHAKE = 1015
