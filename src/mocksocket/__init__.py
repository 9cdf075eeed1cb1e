"""mocksocket: in-process mock of the WebSocket client API and a mock server.

Code written against the browser-style WebSocket API (``onopen``,
``send``, ``close``, ``readyState``) runs unchanged against a simulated
connection, which makes socket-driven code testable without a network.

Example:
    >>> from mocksocket import ManualScheduler, NetworkBridge, Server, WebSocket
    >>> network = NetworkBridge(ManualScheduler())
    >>> server = Server("ws://localhost:8080", network=network)
    >>> socket = WebSocket("ws://localhost:8080", network=network)
    >>> socket.ready_state.name
    'CONNECTING'
    >>> network.scheduler.flush() > 0
    True
    >>> socket.ready_state.name
    'OPEN'
"""

from mocksocket.errors import (
    AddressInUseError,
    CloseReasonTooLongError,
    InvalidCloseCodeError,
    InvalidProtocolError,
    InvalidStateError,
    InvalidTransitionError,
    InvalidURLError,
    MockSocketError,
    SchedulerError,
)
from mocksocket.event_target import EventTarget, SlotEventTarget
from mocksocket.models.enums import CloseCode, ReadyState
from mocksocket.models.events import CloseEvent, Event, MessageEvent
from mocksocket.network import NetworkBridge, network_bridge
from mocksocket.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from mocksocket.server import Server, ServerConnection, ServerOptions
from mocksocket.websocket import WebSocket

__version__ = "0.1.0"

__all__ = [
    "AddressInUseError",
    "AsyncioScheduler",
    "CloseCode",
    "CloseEvent",
    "CloseReasonTooLongError",
    "Event",
    "EventTarget",
    "InvalidCloseCodeError",
    "InvalidProtocolError",
    "InvalidStateError",
    "InvalidTransitionError",
    "InvalidURLError",
    "ManualScheduler",
    "MessageEvent",
    "MockSocketError",
    "NetworkBridge",
    "ReadyState",
    "Scheduler",
    "Server",
    "ServerConnection",
    "ServerOptions",
    "SlotEventTarget",
    "WebSocket",
    "network_bridge",
]
