"""Listener registration and dispatch shared by sockets, servers and connections.

Each event type keeps an ordered list of listeners. On top of that, the
``on<type>`` properties of a socket each own one distinguished slot: assigning
the property swaps the slot's entry in that list and leaves listeners added
through ``add_event_listener`` alone, even when the same callable was
registered both ways.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mocksocket.models.events import Event

Listener = Callable[..., Any]


class _SlotListener:
    """List entry owned by an ``on<type>`` property; compares by identity."""

    __slots__ = ("listener",)

    def __init__(self, listener: Listener) -> None:
        self.listener = listener

    def __call__(self, *args: Any) -> Any:
        return self.listener(*args)


class EventTarget:
    """Ordered multi-listener registry with DOM-style dispatch."""

    def __init__(self) -> None:
        self.listeners: dict[str, list[Listener]] = {}
        self._slots: dict[str, _SlotListener] = {}

    def add_event_listener(self, type: str, listener: Listener) -> None:
        """Register ``listener`` for ``type``; registering the same callable twice is a no-op."""
        if not callable(listener):
            raise TypeError(f"listener for '{type}' must be callable, got {listener!r}")
        registered = self.listeners.setdefault(type, [])
        if listener not in registered:
            registered.append(listener)

    def remove_event_listener(self, type: str, listener: Listener | None = None) -> None:
        """Remove one listener, or every listener of ``type`` when ``listener`` is None.

        Removing the callable currently held by the ``on<type>`` slot clears
        the slot as well.
        """
        if listener is None:
            self.listeners.pop(type, None)
            self._slots.pop(type, None)
            return
        self._discard(type, listener)
        slot = self._slots.get(type)
        if slot is not None and slot.listener is listener:
            del self._slots[type]
            self._discard(type, slot)

    def _discard(self, type: str, entry: Listener) -> None:
        registered = self.listeners.get(type)
        if registered and entry in registered:
            registered.remove(entry)
            if not registered:
                del self.listeners[type]

    def dispatch_event(self, event: Event, *args: Any) -> bool:
        """Call every listener registered for ``event.type``, in registration order.

        Listeners receive ``event``, or ``*args`` instead when any are given.
        The listener list is copied first, so listeners may add or remove
        listeners without affecting the current dispatch.

        Returns:
            True if at least one listener ran.
        """
        registered = list(self.listeners.get(event.type, ()))
        for listener in registered:
            if args:
                listener(*args)
            else:
                listener(event)
        return bool(registered)

    def _get_slot(self, type: str) -> Listener | None:
        slot = self._slots.get(type)
        return slot.listener if slot is not None else None

    def _set_slot(self, type: str, listener: Listener | None) -> None:
        if listener is not None and not callable(listener):
            raise TypeError(f"on{type} must be callable or None, got {listener!r}")
        previous = self._slots.pop(type, None)
        if previous is not None:
            self._discard(type, previous)
        if listener is not None:
            slot = _SlotListener(listener)
            self.listeners.setdefault(type, []).append(slot)
            self._slots[type] = slot


def _slot_property(type: str) -> property:
    def getter(self: EventTarget) -> Listener | None:
        return self._get_slot(type)

    def setter(self: EventTarget, listener: Listener | None) -> None:
        self._set_slot(type, listener)

    return property(getter, setter, doc=f"Single-slot '{type}' listener.")


class SlotEventTarget(EventTarget):
    """EventTarget exposing ``onopen``, ``onmessage``, ``onclose`` and ``onerror``."""

    onopen = _slot_property("open")
    onmessage = _slot_property("message")
    onclose = _slot_property("close")
    onerror = _slot_property("error")
