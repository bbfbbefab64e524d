"""Event records, flag sets and the interface shared by readiness back ends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Any

MAX_GET_EVENT = 100


class EventType(IntFlag):
    """Readiness conditions reported for, or requested on, an event."""

    NONE = 0x0
    READ = 0x1
    WRITE = 0x1 << 1
    TIMER = 0x1 << 2
    EOF = 0x1 << 3
    ERROR = 0x1 << 4
    # Set by a handler that released the event while other notifications for
    # the same descriptor were still queued; those must then be skipped.
    FINISH = 0x1 << 5


class EventOp(IntEnum):
    """Operations for EventHandler.set_event."""

    ADD = 0x0
    DEL = 0x1
    ENABLE = 0x1 << 1
    DISABLE = 0x1 << 2


class FdType(IntEnum):
    """Kinds of descriptor an event may be attached to."""

    TCP4_LISTEN = 0x8
    TCP6_LISTEN = 0x4
    TCPV4_CONNECT = 0x3
    TCPV6_CONNECT = 0x1
    UDP4_SOCKET = 0x2
    UDP6_SOCKET = 0x7


@dataclass(eq=False)
class Event:
    """A descriptor watched by an EventHandler, with the user's data."""

    fd: int
    fd_type: int = 0
    udata: Any = None
    ev_type: EventType = EventType.NONE
    index: int = -1
    uevent: Any = None


class EventHandler(ABC):
    """Registry of at most max_event events plus a readiness back end."""

    mod_name = "event"

    def __init__(self, max_event: int) -> None:
        if max_event < 0:
            raise ValueError("max_event must not be negative")
        self.max_event = max_event
        self._events: list[Event] = []

    @property
    def events(self) -> tuple[Event, ...]:
        """The registered events in registry order."""
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def _register(self, event: Event) -> None:
        if len(self._events) >= self.max_event:
            raise IndexError("event array is full")
        event.index = len(self._events)
        self._events.append(event)

    def _unregister(self, event: Event) -> bool:
        """Remove event, moving the last one into its slot; False if absent."""
        idx = event.index
        if not 0 <= idx < len(self._events) or self._events[idx] is not event:
            return False
        last = self._events.pop()
        if last is not event:
            last.index = idx
            self._events[idx] = last
        event.index = -1
        return True

    @abstractmethod
    def add_event(self, event: Event, ev_type: int) -> None:
        """Start watching event for the READ and WRITE bits of ev_type."""

    @abstractmethod
    def set_event(self, event: Event, op: int, ev_type: int) -> None:
        """Enable or disable READ and WRITE interest of a watched event."""

    @abstractmethod
    def del_event(self, event: Event) -> None:
        """Stop watching event."""

    @abstractmethod
    def get_events(self, max_events: int = MAX_GET_EVENT) -> list[Event]:
        """Wait briefly and return the ready events, ev_type set on each."""

    def close(self) -> None:
        """Forget every registered event."""
        for event in self._events:
            event.index = -1
        self._events.clear()

    def __enter__(self) -> EventHandler:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()