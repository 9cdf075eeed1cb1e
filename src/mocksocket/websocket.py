"""Mock WebSocket client mimicking the browser WebSocket API.

A WebSocket built here never touches the network. It looks up a mock Server
by URL on a NetworkBridge and reproduces the lifecycle a real connection
would go through:

    CONNECTING ──> OPEN ──> CLOSING ──> CLOSED
        │            │                    ▲
        └────────────┴────────────────────┘
          rejected handshake, close() while connecting, connection failure

Nothing happens inside the constructor or inside ``send``/``close``: every
event is emitted from a deferred task, so listeners attached right after the
call still observe it::

    socket = WebSocket("ws://localhost:8080", network=network)
    socket.onopen = lambda event: socket.send("hello")  # still fires
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mocksocket.errors import CloseReasonTooLongError, InvalidCloseCodeError, InvalidStateError
from mocksocket.event_target import SlotEventTarget
from mocksocket.models.constants import (
    APP_CLOSE_CODE_MAX,
    APP_CLOSE_CODE_MIN,
    CLOSE_CODE_NORMAL,
    CLOSE_ERROR_PREFIX,
    DEFAULT_BINARY_TYPE,
    MAX_CLOSE_REASON_BYTES,
    SEND_ERROR_PREFIX,
)
from mocksocket.models.enums import CloseCode, ReadyState
from mocksocket.models.events import create_event, create_message_event
from mocksocket.models.validators import utf8_byte_length, validate_protocols, validate_url
from mocksocket.network import NetworkBridge, network_bridge
from mocksocket.observability import describe_payload, get_logger
from mocksocket.state.closing import CloseFrame, close_connection, fail_connection, terminate
from mocksocket.state.machine import transition

if TYPE_CHECKING:
    from mocksocket.server import Server

logger = get_logger(__name__)

AUTHENTICATION_FAILED = "HTTP Authentication failed; no valid credentials available"
INVALID_SUB_PROTOCOL = "Invalid Sub-Protocol"


def validate_close_code(code: Any) -> None:
    """Check a close code given to ``close()``: 1000, or 3000 through 4999.

    Raises:
        InvalidCloseCodeError: For any other value, including non-integers.
    """
    valid = (
        isinstance(code, int)
        and not isinstance(code, bool)
        and (code == CLOSE_CODE_NORMAL or APP_CLOSE_CODE_MIN <= code <= APP_CLOSE_CODE_MAX)
    )
    if not valid:
        raise InvalidCloseCodeError(
            code,
            f"{CLOSE_ERROR_PREFIX} The code must be either {CLOSE_CODE_NORMAL}, or between "
            f"{APP_CLOSE_CODE_MIN} and {APP_CLOSE_CODE_MAX}. {code} is neither.",
        )


def validate_close_reason(reason: Any) -> None:
    """Check a close reason fits a close frame once UTF-8 encoded.

    Raises:
        TypeError: If ``reason`` is not a string.
        CloseReasonTooLongError: If it encodes to more than 123 bytes.
    """
    if not isinstance(reason, str):
        raise TypeError(f"{CLOSE_ERROR_PREFIX} The reason must be a string, got {reason!r}.")
    length = utf8_byte_length(reason)
    if length > MAX_CLOSE_REASON_BYTES:
        raise CloseReasonTooLongError(
            length,
            MAX_CLOSE_REASON_BYTES,
            f"{CLOSE_ERROR_PREFIX} The message must not be greater than "
            f"{MAX_CLOSE_REASON_BYTES} bytes.",
        )


class WebSocket(SlotEventTarget):
    """Simulated client end of one WebSocket connection.

    Args:
        url: ws:// or wss:// URL of the mock server to connect to.
        protocols: Sub-protocol name, or sequence of names, to request.
        network: Bridge to look the server up on; defaults to the module-level bridge.

    Raises:
        InvalidURLError: If ``url`` is malformed.
        InvalidProtocolError: If a sub-protocol is malformed or requested twice.

    A failed handshake never raises: it is reported with ``error`` and
    ``close`` events.
    """

    CONNECTING = ReadyState.CONNECTING
    OPEN = ReadyState.OPEN
    CLOSING = ReadyState.CLOSING
    CLOSED = ReadyState.CLOSED

    def __init__(
        self,
        url: str,
        protocols: str | list[str] | tuple[str, ...] | None = None,
        network: NetworkBridge | None = None,
    ) -> None:
        super().__init__()
        self._url = validate_url(url)
        self._requested_protocols = validate_protocols(protocols)
        self._protocol = self._requested_protocols[0] if self._requested_protocols else ""
        self.binary_type = DEFAULT_BINARY_TYPE
        self.extensions = ""
        self.buffered_amount = 0
        self._ready_state = ReadyState.CONNECTING
        self._close_requested = False
        self._close_frame: CloseFrame | None = None

        self.network = network if network is not None else network_bridge
        self._server: Server | None = None
        # Scheduling may raise; attach only once it succeeded
        self.network.scheduler.defer(self._negotiate)
        self._server = self.network.attach_websocket(self, self._url)

    @property
    def url(self) -> str:
        return self._url

    @property
    def protocol(self) -> str:
        """Sub-protocol in use: tentatively the first requested, then the server's choice."""
        return self._protocol

    @property
    def ready_state(self) -> ReadyState:
        return self._ready_state

    @property
    def requested_protocols(self) -> list[str]:
        return list(self._requested_protocols)

    def _reject(self, reason: str | None) -> None:
        message = f"WebSocket connection to '{self._url}' failed"
        if reason:
            message = f"{message}: {reason}"
        logger.error("mocksocket.websocket.connection_failed", url=self._url, reason=message)
        terminate(self, CloseCode.CLOSE_NORMAL, was_clean=False, error=True)

    def _negotiate(self) -> None:
        """Run the opening handshake against the server found at construction."""
        if self._close_requested or self._ready_state is not ReadyState.CONNECTING:
            return

        server = self._server
        if server is None:
            self._reject(None)
            return

        verify_client = server.options.verify_client
        if verify_client is not None and not verify_client():
            self._reject(AUTHENTICATION_FAILED)
            return

        select_protocol = server.options.select_protocol
        if select_protocol is not None:
            selected = select_protocol(list(self._requested_protocols))
            if selected and selected not in self._requested_protocols:
                self._reject(INVALID_SUB_PROTOCOL)
                return
            self._protocol = selected or ""

        transition(self, ReadyState.OPEN)
        logger.debug("mocksocket.websocket.open", url=self._url, protocol=self._protocol)
        self.dispatch_event(create_event("open", target=self))
        server.notify_connection(self)

    def send(self, data: Any) -> None:
        """Send ``data`` to the server.

        Delivery is fire-and-forget and happens on a later tick. While the
        socket is still connecting the data is dropped.

        Raises:
            InvalidStateError: If the socket is closing or closed.
        """
        if self._ready_state.is_closing_or_closed() or self._close_requested:
            raise InvalidStateError(
                self._ready_state.name,
                f"{SEND_ERROR_PREFIX} WebSocket is already in CLOSING or CLOSED state.",
                details={"url": self._url},
            )
        if self._ready_state is not ReadyState.OPEN or self._server is None:
            logger.debug(
                "mocksocket.websocket.send_dropped", url=self._url, state=self._ready_state.name
            )
            return

        event = create_message_event(data, origin=self._url)
        self.network.scheduler.defer(self._server.deliver_message, self, event)

    def close(self, code: int | None = None, reason: str | None = None) -> None:
        """Close the connection, or abort it if the handshake has not finished.

        Arguments are validated before anything else happens. Calling close on
        a socket that is already closing or closed does nothing.

        Raises:
            InvalidCloseCodeError: If ``code`` is not 1000 or in 3000-4999.
            CloseReasonTooLongError: If ``reason`` exceeds 123 UTF-8 bytes.
        """
        if code is not None:
            validate_close_code(code)
        if reason is not None:
            validate_close_reason(reason)

        if self._ready_state.is_closing_or_closed() or self._close_requested:
            return

        if self._ready_state is ReadyState.CONNECTING:
            fail_connection(self, code, reason)
        else:
            close_connection(self, code, reason)

    def receive_message(self, data: Any, origin: str = "", type: str = "message") -> None:
        """Dispatch a message from the server; ignored unless the socket is OPEN."""
        if self._ready_state is not ReadyState.OPEN:
            logger.debug("mocksocket.websocket.message_dropped", url=self._url)
            return
        logger.debug("mocksocket.websocket.message", url=self._url, data=describe_payload(data))
        self.dispatch_event(create_message_event(data, origin=origin, target=self, type=type))

    def __repr__(self) -> str:
        return f"WebSocket(url={self._url!r}, ready_state={self._ready_state.name})"
