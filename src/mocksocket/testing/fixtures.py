"""Pytest fixtures and context managers for mocksocket tests.

Load as a plugin (``pytest_plugins = ["mocksocket.testing.fixtures"]``).

Fixtures:
    scheduler: ManualScheduler drained explicitly by the test.
    network: NetworkBridge running on ``scheduler``, isolated per test.
    mock_server: Server listening on DEFAULT_TEST_URL of ``network``.

Context managers:
    mock_network(): Sync context manager yielding an isolated NetworkBridge.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import pytest

from mocksocket.network import NetworkBridge
from mocksocket.scheduler import ManualScheduler
from mocksocket.server import Server

DEFAULT_TEST_URL = "ws://localhost:8080/"


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a fresh ManualScheduler for the test."""
    return ManualScheduler()


@pytest.fixture
def network(scheduler: ManualScheduler) -> Iterator[NetworkBridge]:
    """Provide a NetworkBridge on the test's scheduler; reset after the test."""
    bridge = NetworkBridge(scheduler)
    yield bridge
    scheduler.clear()
    bridge.reset()


@pytest.fixture
def mock_server(network: NetworkBridge) -> Iterator[Server]:
    """Provide a Server on DEFAULT_TEST_URL; stopped after the test."""
    server = Server(DEFAULT_TEST_URL, network=network)
    yield server
    server.stop()


@contextmanager
def mock_network() -> Iterator[NetworkBridge]:
    """Context manager that provides an isolated NetworkBridge for the scope.

    On exit, queued tasks are flushed and the bridge is reset.

    Example:
        >>> with mock_network() as network:
        ...     server = Server("ws://localhost/", network=network)
        ...     socket = WebSocket("ws://localhost/", network=network)
        ...     network.scheduler.flush()
    """
    scheduler = ManualScheduler()
    bridge = NetworkBridge(scheduler)
    try:
        yield bridge
    finally:
        scheduler.flush()
        bridge.reset()


__all__ = [
    "DEFAULT_TEST_URL",
    "mock_network",
    "mock_server",
    "network",
    "scheduler",
]
