"""Ready-state machine for mock sockets.

This module lists the ready-state transitions a socket may take and applies
them with validation. CLOSING is reachable only from OPEN; CLOSED is terminal.

Example:
    >>> from mocksocket.models.enums import ReadyState
    >>> can_transition(ReadyState.CONNECTING, ReadyState.OPEN)
    True
    >>> can_transition(ReadyState.CONNECTING, ReadyState.CLOSING)
    False
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mocksocket.errors import InvalidTransitionError
from mocksocket.models.enums import ReadyState
from mocksocket.observability import get_logger

if TYPE_CHECKING:
    from mocksocket.websocket import WebSocket

__all__ = ["ReadyState", "VALID_TRANSITIONS", "can_transition", "transition"]

logger = get_logger(__name__)

VALID_TRANSITIONS: dict[ReadyState, frozenset[ReadyState]] = {
    # CLOSED directly: rejected handshake, or close() before the handshake finished
    ReadyState.CONNECTING: frozenset({ReadyState.OPEN, ReadyState.CLOSED}),
    # CLOSED directly: connection failure (e.g. server-simulated error)
    ReadyState.OPEN: frozenset({ReadyState.CLOSING, ReadyState.CLOSED}),
    ReadyState.CLOSING: frozenset({ReadyState.CLOSED}),
    ReadyState.CLOSED: frozenset(),  # Terminal state
}


def can_transition(from_state: ReadyState, to_state: ReadyState) -> bool:
    """Check if a socket may move from one ready state to another.

    Example:
        >>> can_transition(ReadyState.CLOSED, ReadyState.OPEN)
        False
    """
    return to_state in VALID_TRANSITIONS.get(from_state, frozenset())


def transition(socket: WebSocket, new_state: ReadyState) -> None:
    """Move ``socket`` to ``new_state``.

    Raises:
        InvalidTransitionError: If the lifecycle forbids the transition.
    """
    current = socket.ready_state
    if not can_transition(current, new_state):
        raise InvalidTransitionError(
            from_state=current.name, to_state=new_state.name, details={"url": socket.url}
        )
    socket._ready_state = new_state
    logger.debug(
        "mocksocket.websocket.state_transition",
        url=socket.url,
        from_state=current.name,
        to_state=new_state.name,
    )
