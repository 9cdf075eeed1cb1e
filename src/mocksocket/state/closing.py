"""Close and failure algorithms for mock sockets.

Two ways a connection ends:

- Failing the connection (``fail_connection``): the socket goes straight to
  CLOSED, emitting ``error`` and then an unclean ``close``. Used when
  ``close()`` is called before the handshake finished and when the server
  simulates an error.
- Closing handshake (``close_connection`` / ``receive_close``): the socket
  goes OPEN -> CLOSING, the other side echoes the close frame, then the
  socket goes CLOSED and emits a clean ``close``.

Either side may start the handshake, even both at once. The close frame
processed first is the one both sides report.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from mocksocket.models.base import MockSocketBaseModel
from mocksocket.models.enums import CloseCode, ReadyState
from mocksocket.models.events import CloseEvent, create_close_event, create_event
from mocksocket.observability import get_logger
from mocksocket.state.machine import transition

if TYPE_CHECKING:
    from mocksocket.websocket import WebSocket

logger = get_logger(__name__)


class CloseFrame(MockSocketBaseModel):
    """Code and reason carried by a close handshake."""

    code: int = Field(..., description="Close status code")
    reason: str = Field(default="", description="Close reason")


def terminate(
    socket: WebSocket,
    code: int,
    reason: str = "",
    *,
    was_clean: bool,
    error: bool,
) -> CloseEvent:
    """Detach ``socket``, mark it CLOSED and emit its terminal events.

    Emits ``error`` first when ``error`` is set, then ``close``; the server's
    handle for this socket, if it ever connected, is told about the close.
    Callers must check the socket is not already CLOSED.
    """
    socket.network.remove_websocket(socket, socket.url)
    transition(socket, ReadyState.CLOSED)
    if error:
        socket.dispatch_event(create_event("error", target=socket))
    close_event = create_close_event(code, reason, was_clean=was_clean, target=socket)
    socket.dispatch_event(close_event)
    server = socket._server
    if server is not None:
        server.notify_close(socket, close_event)
    return close_event


def fail_connection(
    socket: WebSocket, code: int | None = None, reason: str | None = None
) -> None:
    """Schedule failing the connection; the close code defaults to CLOSE_ABNORMAL."""
    socket._close_requested = True
    frame = CloseFrame(
        code=code if code is not None else CloseCode.CLOSE_ABNORMAL, reason=reason or ""
    )
    socket.network.scheduler.defer(_fail, socket, frame)


def _fail(socket: WebSocket, frame: CloseFrame) -> None:
    if socket.ready_state is ReadyState.CLOSED:
        return
    if socket._close_frame is None:
        socket._close_frame = frame
    logger.info(
        "mocksocket.websocket.connection_failed",
        url=socket.url,
        code=socket._close_frame.code,
        reason=socket._close_frame.reason,
    )
    terminate(
        socket,
        socket._close_frame.code,
        socket._close_frame.reason,
        was_clean=False,
        error=True,
    )


def close_connection(
    socket: WebSocket, code: int | None = None, reason: str | None = None
) -> None:
    """Schedule a client-initiated closing handshake.

    Without a code the close is reported with CLOSE_NO_STATUS, as a browser does.
    """
    socket._close_requested = True
    frame = CloseFrame(
        code=code if code is not None else CloseCode.CLOSE_NO_STATUS, reason=reason or ""
    )
    socket.network.scheduler.defer(_start_closing_handshake, socket, frame)


def _start_closing_handshake(socket: WebSocket, frame: CloseFrame) -> None:
    if socket.ready_state is not ReadyState.OPEN:
        # The server closed or failed the connection first
        return
    if socket._close_frame is None:
        socket._close_frame = frame
    transition(socket, ReadyState.CLOSING)
    server = socket._server
    if server is not None and server.has_client(socket):
        server.acknowledge_close(socket, socket._close_frame)
    else:
        socket.network.scheduler.defer(finish_close, socket)


def receive_close(socket: WebSocket, code: int, reason: str = "") -> None:
    """Handle a close frame sent by the server; the client echoes it at once."""
    if socket.ready_state is ReadyState.CLOSED:
        return
    if socket._close_frame is None:
        socket._close_frame = CloseFrame(code=code, reason=reason)
    socket._close_requested = True
    if socket.ready_state is ReadyState.CONNECTING:
        terminate(
            socket,
            socket._close_frame.code,
            socket._close_frame.reason,
            was_clean=False,
            error=True,
        )
        return
    if socket.ready_state is ReadyState.OPEN:
        transition(socket, ReadyState.CLOSING)
    finish_close(socket)


def finish_close(socket: WebSocket, was_clean: bool = True) -> None:
    """Complete the closing handshake; a no-op once the socket is CLOSED."""
    if socket.ready_state is ReadyState.CLOSED:
        return
    frame = socket._close_frame or CloseFrame(code=CloseCode.CLOSE_NO_STATUS)
    logger.debug(
        "mocksocket.websocket.closed", url=socket.url, code=frame.code, reason=frame.reason
    )
    terminate(socket, frame.code, frame.reason, was_clean=was_clean, error=False)
