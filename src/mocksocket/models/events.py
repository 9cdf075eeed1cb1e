"""Event objects dispatched by sockets and servers.

Events are frozen models: every listener of a dispatch receives the same
instance and none of them can alter what the next listener sees.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from mocksocket.models.base import MockSocketBaseModel
from mocksocket.models.enums import CloseCode


class Event(MockSocketBaseModel):
    """A plain lifecycle event (``open``, ``error``, ``connection``).

    Attributes:
        type: Event type; listeners registered for this type receive it.
        target: Object the event was dispatched on (socket, server or connection).
    """

    type: str = Field(..., min_length=1, description="Event type")
    target: Any = Field(default=None, repr=False, exclude=True, description="Dispatching object")

    @property
    def current_target(self) -> Any:
        return self.target

    @property
    def src_element(self) -> Any:
        return self.target


class MessageEvent(Event):
    """A delivered message.

    Attributes:
        data: The payload exactly as passed to ``send``.
        origin: URL of the sending side.
        last_event_id: Always empty; kept for API compatibility.
    """

    type: str = "message"
    data: Any = Field(default=None, description="Message payload")
    origin: str = Field(default="", description="URL of the sender")
    last_event_id: str = Field(default="", description="Unused, always empty")


class CloseEvent(Event):
    """End of a connection.

    Attributes:
        code: Close status code.
        reason: Close reason supplied by whichever side closed first.
        was_clean: False when the connection failed rather than closing by handshake.
    """

    type: str = "close"
    code: int = Field(default=CloseCode.CLOSE_NORMAL, description="Close status code")
    reason: str = Field(default="", description="Close reason")
    was_clean: bool = Field(default=True, description="Closed by a completed handshake")


def create_event(type: str, target: Any = None) -> Event:
    """Build a plain event."""
    return Event(type=type, target=target)


def create_message_event(
    data: Any, origin: str = "", target: Any = None, type: str = "message"
) -> MessageEvent:
    """Build a message event carrying ``data``."""
    return MessageEvent(type=type, data=data, origin=origin, target=target)


def create_close_event(
    code: int | None = None,
    reason: str | None = None,
    was_clean: bool = True,
    target: Any = None,
) -> CloseEvent:
    """Build a close event; a missing code is reported as CLOSE_NORMAL."""
    return CloseEvent(
        code=int(code) if code is not None else int(CloseCode.CLOSE_NORMAL),
        reason=reason or "",
        was_clean=was_clean,
        target=target,
    )
