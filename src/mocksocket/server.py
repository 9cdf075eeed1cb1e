"""Mock WebSocket server: the peer side of simulated connections.

A Server attaches to a NetworkBridge at a URL. Sockets constructed for that
URL negotiate with it (optional client verification and sub-protocol
selection), and every accepted socket is handed to ``connection`` listeners
as a ServerConnection, the server's view of that one client.

Example::

    network = NetworkBridge(ManualScheduler())
    server = Server("ws://localhost:8080", network=network)
    server.on("connection", lambda conn: conn.send("welcome"))

    socket = WebSocket("ws://localhost:8080", network=network)
    socket.onmessage = lambda event: print(event.data)
    network.scheduler.flush()  # prints "welcome"
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import Field

from mocksocket.event_target import EventTarget, Listener
from mocksocket.models.base import MockSocketBaseModel
from mocksocket.models.enums import CloseCode, ReadyState
from mocksocket.models.events import Event, MessageEvent, create_close_event, create_event
from mocksocket.models.validators import validate_url
from mocksocket.network import NetworkBridge, network_bridge
from mocksocket.observability import describe_payload, get_logger
from mocksocket.state.closing import CloseFrame, fail_connection, finish_close, receive_close

if TYPE_CHECKING:
    from mocksocket.websocket import WebSocket

logger = get_logger(__name__)


class ServerOptions(MockSocketBaseModel):
    """Handshake configuration of a mock server.

    Attributes:
        verify_client: Called with no arguments for each connection attempt;
            returning False rejects the attempt as an authentication failure.
        select_protocol: Called with the sub-protocols the client requested;
            returns the one to use, or "" for none.
    """

    verify_client: Callable[[], bool] | None = Field(
        default=None, description="Accept or reject a connection attempt"
    )
    select_protocol: Callable[[list[str]], str] | None = Field(
        default=None, description="Choose a sub-protocol from the requested ones"
    )


class ServerConnection(EventTarget):
    """The server's handle on one connected socket.

    Listeners registered with ``on`` receive this client's ``message`` and
    ``close`` events only.
    """

    def __init__(self, server: Server, socket: WebSocket) -> None:
        super().__init__()
        self.server = server
        self.socket = socket

    @property
    def url(self) -> str:
        return self.socket.url

    @property
    def protocol(self) -> str:
        return self.socket.protocol

    def on(self, type: str, listener: Listener) -> None:
        self.add_event_listener(type, listener)

    def off(self, type: str, listener: Listener | None = None) -> None:
        self.remove_event_listener(type, listener)

    def send(self, data: Any) -> None:
        """Deliver ``data`` to the client as a ``message`` event."""
        self.server.network.scheduler.defer(
            self.socket.receive_message, data, self.server.url
        )

    def close(self, code: int = CloseCode.CLOSE_NORMAL, reason: str = "") -> None:
        """Start a server-initiated closing handshake with this client."""
        self.server.network.scheduler.defer(receive_close, self.socket, int(code), reason)

    def __repr__(self) -> str:
        return f"ServerConnection(url={self.url!r}, ready_state={self.socket.ready_state.name})"


class Server(EventTarget):
    """Mock server listening on a URL of a NetworkBridge.

    Server-level events:
        connection: listener(connection) for each accepted socket.
        message: listener(data, connection) for every message from any client.
        disconnect: listener(connection, close_event) when a client's connection ends.
        close: listener(close_event) when the server itself closes.

    Args:
        url: ws:// or wss:// URL to listen on.
        options: Handshake configuration; keyword arguments are merged into it.
        network: Bridge to attach to; defaults to the module-level bridge.

    Raises:
        InvalidURLError: If ``url`` is malformed.
        AddressInUseError: If a server already listens on ``url``.
    """

    def __init__(
        self,
        url: str,
        options: ServerOptions | None = None,
        network: NetworkBridge | None = None,
        **option_kwargs: Any,
    ) -> None:
        super().__init__()
        self.url = validate_url(url)
        if option_kwargs:
            base = dict(options) if options is not None else {}
            options = ServerOptions(**{**base, **option_kwargs})
        self.options = options or ServerOptions()
        self.network = network if network is not None else network_bridge
        self._connections: dict[int, ServerConnection] = {}
        self._closed = False
        self.network.attach_server(self, self.url)
        logger.debug("mocksocket.server.listening", url=self.url)

    @classmethod
    def of(cls, url: str, network: NetworkBridge | None = None) -> Server | None:
        """Return the server listening on ``url``, if any."""
        bridge = network if network is not None else network_bridge
        return bridge.server_lookup(validate_url(url))

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def on(self, type: str, listener: Listener) -> None:
        self.add_event_listener(type, listener)

    def off(self, type: str, listener: Listener | None = None) -> None:
        self.remove_event_listener(type, listener)

    def clients(self) -> list[WebSocket]:
        """Sockets currently attached to this server, in connection order."""
        return self.network.websockets_lookup(self.url)

    def connections(self) -> list[ServerConnection]:
        """Handles of the sockets that completed the handshake and are not closed yet."""
        return list(self._connections.values())

    def has_client(self, socket: WebSocket) -> bool:
        return id(socket) in self._connections

    def notify_connection(self, socket: WebSocket) -> ServerConnection:
        """Register an accepted socket and dispatch ``connection`` with its handle."""
        connection = ServerConnection(self, socket)
        self._connections[id(socket)] = connection
        logger.debug("mocksocket.server.connection", url=self.url, protocol=socket.protocol)
        self.dispatch_event(create_event("connection", target=self), connection)
        return connection

    def deliver_message(self, socket: WebSocket, event: MessageEvent) -> None:
        """Dispatch a message sent by ``socket``; dropped if the client is gone."""
        connection = self._connections.get(id(socket))
        if connection is None:
            logger.debug("mocksocket.server.message_dropped", url=self.url)
            return
        logger.debug(
            "mocksocket.server.message", url=self.url, data=describe_payload(event.data)
        )
        self.dispatch_event(event, event.data, connection)
        connection.dispatch_event(event)

    def acknowledge_close(self, socket: WebSocket, frame: CloseFrame) -> None:
        """Echo a client's close frame; the client finishes closing on the next tick."""
        logger.debug(
            "mocksocket.server.close_acknowledged",
            url=self.url,
            code=frame.code,
            reason=frame.reason,
        )
        self.network.scheduler.defer(finish_close, socket)

    def notify_close(self, socket: WebSocket, event: Event) -> None:
        """Forget a closed client and dispatch its close on the server side."""
        connection = self._connections.pop(id(socket), None)
        if connection is None:
            return
        connection.dispatch_event(event)
        self.dispatch_event(create_event("disconnect", target=self), connection, event)

    def emit(self, type: str, data: Any) -> None:
        """Send ``data`` as a ``type`` event to every open client."""
        for connection in self.connections():
            self.network.scheduler.defer(
                connection.socket.receive_message, data, self.url, type
            )

    def send(self, data: Any) -> None:
        """Broadcast ``data`` as a ``message`` to every open client."""
        self.emit("message", data)

    def simulate(self, type: str) -> None:
        """Simulate a transport event on every client.

        Only ``error`` is supported: every client connection fails, emitting
        ``error`` and an unclean ``close`` with CLOSE_ABNORMAL.
        """
        if type != "error":
            raise ValueError(f"Cannot simulate '{type}': only 'error' is supported")
        for socket in self.clients():
            if socket.ready_state is not ReadyState.CLOSED:
                fail_connection(socket, CloseCode.CLOSE_ABNORMAL)

    def close(
        self, code: int = CloseCode.CLOSE_NORMAL, reason: str = "", was_clean: bool = True
    ) -> None:
        """Close every client, emit ``close`` on the server and stop listening.

        With ``was_clean=False`` clients fail instead of closing by handshake, and so do
        clients still connecting: they never open. Closing an already closed server is
        a no-op.
        """
        if self._closed:
            return
        self._closed = True
        for socket in self.clients():
            if was_clean and socket.ready_state is not ReadyState.CONNECTING:
                self.network.scheduler.defer(receive_close, socket, int(code), reason)
            else:
                fail_connection(socket, int(code), reason)
        self.network.remove_server(self.url)
        logger.debug("mocksocket.server.closed", url=self.url, code=int(code))
        self.network.scheduler.defer(
            self.dispatch_event,
            create_close_event(int(code), reason, was_clean=was_clean, target=self),
        )

    def stop(self, callback: Callable[[], Any] | None = None) -> None:
        """Close the server, then run ``callback`` once the close has been dispatched."""
        self.close()
        if callback is not None:
            self.network.scheduler.defer(callback)

    def __repr__(self) -> str:
        return f"Server(url={self.url!r}, connections={len(self._connections)})"
