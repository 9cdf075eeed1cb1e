"""In-process registry pairing mock sockets with mock servers by URL.

The bridge stands in for the network: a socket "connects" by looking up the
server attached at its URL. It indexes servers and sockets between their
attach and detach calls and owns neither.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mocksocket.errors import AddressInUseError
from mocksocket.observability import get_logger
from mocksocket.scheduler import AsyncioScheduler, Scheduler

if TYPE_CHECKING:
    from mocksocket.server import Server
    from mocksocket.websocket import WebSocket

logger = get_logger(__name__)


@dataclass
class _Route:
    server: Server
    websockets: list[WebSocket] = field(default_factory=list)


class NetworkBridge:
    """Registry of servers and their attached sockets, keyed by normalized URL.

    Attributes:
        scheduler: Deferred-execution primitive shared by every socket and
            server on this bridge.
    """

    def __init__(self, scheduler: Scheduler | None = None) -> None:
        self.scheduler: Scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._routes: dict[str, _Route] = {}

    def attach_server(self, server: Server, url: str) -> Server:
        """Register ``server`` at ``url``.

        Raises:
            AddressInUseError: If another server is already attached at ``url``.
        """
        if url in self._routes:
            raise AddressInUseError(url)
        self._routes[url] = _Route(server=server)
        logger.debug("mocksocket.network.server_attached", url=url)
        return server

    def server_lookup(self, url: str) -> Server | None:
        route = self._routes.get(url)
        return route.server if route else None

    def remove_server(self, url: str) -> None:
        """Detach the server at ``url``; sockets attached to it are forgotten too."""
        if self._routes.pop(url, None) is not None:
            logger.debug("mocksocket.network.server_removed", url=url)

    def attach_websocket(self, websocket: WebSocket, url: str) -> Server | None:
        """Attach ``websocket`` to the server at ``url``.

        Returns:
            The server, or None if no server listens at ``url`` (the socket is
            then not registered).
        """
        route = self._routes.get(url)
        if route is None:
            return None
        if websocket not in route.websockets:
            route.websockets.append(websocket)
        return route.server

    def remove_websocket(self, websocket: WebSocket, url: str) -> bool:
        """Detach ``websocket`` from ``url``.

        Returns:
            True if the socket was attached; False if it already was detached.
        """
        route = self._routes.get(url)
        if route is None or websocket not in route.websockets:
            return False
        route.websockets.remove(websocket)
        return True

    def websockets_lookup(self, url: str) -> list[WebSocket]:
        """Return a snapshot of the sockets attached at ``url``."""
        route = self._routes.get(url)
        return list(route.websockets) if route else []

    def reset(self) -> None:
        """Forget every server and socket."""
        self._routes.clear()


network_bridge = NetworkBridge()
"""Default bridge used when no ``network`` is passed; schedules on asyncio."""
