"""mocksocket connection lifecycle: ready-state machine and close algorithms."""

from mocksocket.state.closing import (
    CloseFrame,
    close_connection,
    fail_connection,
    finish_close,
    receive_close,
    terminate,
)
from mocksocket.state.machine import VALID_TRANSITIONS, can_transition, transition

__all__ = [
    "CloseFrame",
    "VALID_TRANSITIONS",
    "can_transition",
    "close_connection",
    "fail_connection",
    "finish_close",
    "receive_close",
    "terminate",
    "transition",
]
