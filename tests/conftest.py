"""Shared pytest fixtures for mocksocket tests.

The scheduler, network and mock_server fixtures come from the
mocksocket.testing.fixtures plugin; this module adds scenario helpers on top.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from mocksocket.network import NetworkBridge
from mocksocket.server import Server, ServerOptions
from mocksocket.testing.fixtures import DEFAULT_TEST_URL
from mocksocket.testing.recorder import EventRecorder
from mocksocket.websocket import WebSocket

# Load mocksocket.testing fixtures (scheduler, network, mock_server)
pytest_plugins = ["mocksocket.testing.fixtures"]

TEST_URL = DEFAULT_TEST_URL


@pytest.fixture
def connect(network: NetworkBridge) -> Callable[..., tuple[WebSocket, EventRecorder]]:
    """Return a factory building a socket on the test network with a recorder attached.

    Returns:
        Callable taking (url, protocols) and returning (socket, recorder).
    """

    def _connect(
        url: str = TEST_URL, protocols: str | list[str] | None = None
    ) -> tuple[WebSocket, EventRecorder]:
        socket = WebSocket(url, protocols, network=network)
        return socket, EventRecorder.attach(socket)

    return _connect


@pytest.fixture
def make_server(network: NetworkBridge) -> Callable[..., Server]:
    """Return a factory building servers on the test network."""

    def _make_server(url: str = TEST_URL, **options: object) -> Server:
        return Server(url, ServerOptions(**options), network=network)

    return _make_server
