"""Readiness back ends: one on select(), one on the platform's best selector."""

from __future__ import annotations

import select
import selectors
import sys
import time
from dataclasses import dataclass

from .event import MAX_GET_EVENT, Event, EventHandler, EventOp, EventType
from .fixed_pool import FixedPool


class SelectEventHandler(EventHandler):
    """Event handler built on select() with a short polling timeout."""

    mod_name = "select_event"

    def __init__(self, max_event: int) -> None:
        super().__init__(max_event)
        self.timeout = 0.01
        self._read: set[int] = set()
        self._write: set[int] = set()
        self._except: set[int] = set()

    def add_event(self, event: Event, ev_type: int) -> None:
        self._register(event)
        if ev_type & EventType.READ:
            self._read.add(event.fd)
        if ev_type & EventType.WRITE:
            self._write.add(event.fd)
        self._except.add(event.fd)
        event.uevent = event.fd

    def set_event(self, event: Event, op: int, ev_type: int) -> None:
        if op == EventOp.ENABLE:
            if ev_type & EventType.WRITE:
                self._write.add(event.fd)
            if ev_type & EventType.READ:
                self._read.add(event.fd)
        elif op == EventOp.DISABLE:
            if ev_type & EventType.WRITE:
                self._write.discard(event.fd)
            if ev_type & EventType.READ:
                self._read.discard(event.fd)

    def del_event(self, event: Event) -> None:
        self._unregister(event)
        self._read.discard(event.fd)
        self._write.discard(event.fd)
        self._except.discard(event.fd)

    def get_events(self, max_events: int = MAX_GET_EVENT) -> list[Event]:
        if not (self._read or self._write or self._except):
            time.sleep(self.timeout)
            return []
        try:
            readable, writable, exceptional = select.select(
                list(self._read), list(self._write), list(self._except), self.timeout
            )
        except OSError:
            return []
        n_ready = len(readable) + len(writable) + len(exceptional)
        if n_ready == 0:
            return []
        readable, writable, exceptional = set(readable), set(writable), set(exceptional)

        ready: list[Event] = []
        for event in self._events:
            ev_type = EventType.NONE
            if event.fd in readable:
                ev_type |= EventType.READ
            if event.fd in writable:
                ev_type |= EventType.WRITE
            if event.fd in exceptional:
                ev_type |= EventType.ERROR
            if ev_type != EventType.NONE:
                event.ev_type = ev_type
                ready.append(event)
            if len(ready) == n_ready or len(ready) >= max_events:
                break
        return ready

    def close(self) -> None:
        self._read.clear()
        self._write.clear()
        self._except.clear()
        super().close()


@dataclass
class _Interest:
    mask: int = 0
    registered: bool = False


def _selector_mask(ev_type: int) -> int:
    mask = 0
    if ev_type & EventType.READ:
        mask |= selectors.EVENT_READ
    if ev_type & EventType.WRITE:
        mask |= selectors.EVENT_WRITE
    return mask


def _selector_name(selector: selectors.BaseSelector) -> str:
    name = type(selector).__name__
    if name.endswith("Selector"):
        name = name[: -len("Selector")]
    return f"{name.lower()}_event"


class SelectorEventHandler(EventHandler):
    """Event handler on the platform's preferred selector (epoll, kqueue, ...)."""

    def __init__(self, max_event: int) -> None:
        super().__init__(max_event)
        self.timeout = 1.0
        self._selector = selectors.DefaultSelector()
        self._pool = FixedPool(max_event, _Interest)
        self.mod_name = _selector_name(self._selector)

    def _apply(self, event: Event) -> None:
        interest: _Interest = event.uevent
        if interest.mask:
            if interest.registered:
                self._selector.modify(event.fd, interest.mask, event)
            else:
                self._selector.register(event.fd, interest.mask, event)
                interest.registered = True
        elif interest.registered:
            self._selector.unregister(event.fd)
            interest.registered = False

    def add_event(self, event: Event, ev_type: int) -> None:
        self._register(event)
        interest = self._pool.pop()
        interest.mask = _selector_mask(ev_type)
        interest.registered = False
        event.uevent = interest
        try:
            self._apply(event)
        except (OSError, ValueError, KeyError):
            self._unregister(event)
            self._pool.push(interest)
            event.uevent = None
            raise

    def set_event(self, event: Event, op: int, ev_type: int) -> None:
        interest: _Interest = event.uevent
        if op == EventOp.ENABLE:
            interest.mask |= _selector_mask(ev_type)
        elif op == EventOp.DISABLE:
            interest.mask &= ~_selector_mask(ev_type)
        self._apply(event)

    def del_event(self, event: Event) -> None:
        interest = event.uevent
        if not isinstance(interest, _Interest):
            return
        if interest.registered:
            try:
                self._selector.unregister(event.fd)
            except (KeyError, ValueError, OSError):
                pass
            interest.registered = False
        if self._unregister(event):
            self._pool.push(interest)
        event.uevent = None

    def get_events(self, max_events: int = MAX_GET_EVENT) -> list[Event]:
        ready: list[Event] = []
        for key, mask in self._selector.select(self.timeout)[:max_events]:
            event: Event = key.data
            ev_type = EventType.NONE
            if mask & selectors.EVENT_READ:
                ev_type |= EventType.READ
            if mask & selectors.EVENT_WRITE:
                ev_type |= EventType.WRITE
            event.ev_type = ev_type
            ready.append(event)
        return ready

    def close(self) -> None:
        self._selector.close()
        super().close()


def create_event_handler(max_event: int) -> EventHandler:
    """The handler best suited to this platform."""
    if sys.platform == "win32":
        return SelectEventHandler(max_event)
    return SelectorEventHandler(max_event)