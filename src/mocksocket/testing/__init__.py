"""mocksocket testing utilities.

Modules:
    fixtures: Pytest fixtures (scheduler, network, mock_server) and the
              mock_network() context manager.
    recorder: EventRecorder capturing events dispatched on sockets and servers.
    assertions: Custom assertions (assert_closed, assert_event_sequence).

Example:
    >>> from mocksocket.testing import EventRecorder, assert_closed
"""

from mocksocket.testing.assertions import assert_closed, assert_event_sequence
from mocksocket.testing.recorder import EventRecorder, RecordedEvent

__all__ = [
    "EventRecorder",
    "RecordedEvent",
    "assert_closed",
    "assert_event_sequence",
]
