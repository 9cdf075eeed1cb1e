"""Value types for mocksocket: lifecycle enums, constants, events and validators."""

from mocksocket.models.base import MockSocketBaseModel
from mocksocket.models.enums import CloseCode, ReadyState
from mocksocket.models.events import (
    CloseEvent,
    Event,
    MessageEvent,
    create_close_event,
    create_event,
    create_message_event,
)
from mocksocket.models.validators import utf8_byte_length, validate_protocols, validate_url

__all__ = [
    "CloseCode",
    "CloseEvent",
    "Event",
    "MessageEvent",
    "MockSocketBaseModel",
    "ReadyState",
    "create_close_event",
    "create_event",
    "create_message_event",
    "utf8_byte_length",
    "validate_protocols",
    "validate_url",
]
