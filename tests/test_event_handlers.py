import socket

import pytest

from gnbnet.event import Event, EventHandler, EventOp, EventType
from gnbnet.event_handlers import (
    SelectEventHandler,
    SelectorEventHandler,
    create_event_handler,
)


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


@pytest.fixture
def pair2():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def _make(kind, max_event=4):
    handler = kind(max_event)
    handler.timeout = 0.05
    return handler


def _poll(handler, tries=40):
    for _ in range(tries):
        ready = handler.get_events(100)
        if ready:
            return ready
    return []


KINDS = [SelectEventHandler, SelectorEventHandler]


@pytest.mark.parametrize("kind", KINDS)
def test_read_readiness(kind, pair):
    a, b = pair
    with _make(kind) as handler:
        ev = Event(fd=a.fileno(), udata="peer")
        handler.add_event(ev, EventType.READ)
        b.send(b"x")
        ready = _poll(handler)
        assert ready == [ev]
        assert ev.ev_type & EventType.READ
        assert not ev.ev_type & EventType.WRITE


@pytest.mark.parametrize("kind", KINDS)
def test_nothing_ready_without_data(kind, pair):
    a, _ = pair
    with _make(kind) as handler:
        handler.add_event(Event(fd=a.fileno()), EventType.READ)
        assert handler.get_events(100) == []


@pytest.mark.parametrize("kind", KINDS)
def test_write_enable_disable(kind, pair):
    a, _ = pair
    with _make(kind) as handler:
        ev = Event(fd=a.fileno())
        handler.add_event(ev, EventType.WRITE)
        assert _poll(handler) == [ev]
        assert ev.ev_type & EventType.WRITE
        handler.set_event(ev, EventOp.DISABLE, EventType.WRITE)
        assert handler.get_events(100) == []
        handler.set_event(ev, EventOp.ENABLE, EventType.WRITE)
        assert _poll(handler) == [ev]


@pytest.mark.parametrize("kind", KINDS)
def test_enable_read_after_adding_without_interest(kind, pair):
    a, b = pair
    with _make(kind) as handler:
        ev = Event(fd=a.fileno())
        handler.add_event(ev, EventType.NONE)
        b.send(b"y")
        handler.set_event(ev, EventOp.DISABLE, EventType.READ)
        assert handler.get_events(100) == []
        handler.set_event(ev, EventOp.ENABLE, EventType.READ)
        assert _poll(handler) == [ev]
        assert ev.ev_type & EventType.READ


@pytest.mark.parametrize("kind", KINDS)
def test_delete_stops_reporting(kind, pair):
    a, b = pair
    with _make(kind) as handler:
        ev = Event(fd=a.fileno())
        handler.add_event(ev, EventType.READ)
        b.send(b"z")
        handler.del_event(ev)
        assert len(handler) == 0
        assert ev.index == -1
        assert handler.get_events(100) == []


@pytest.mark.parametrize("kind", KINDS)
def test_delete_moves_last_event(kind, pair, pair2):
    with _make(kind) as handler:
        first = Event(fd=pair[0].fileno())
        second = Event(fd=pair2[0].fileno())
        handler.add_event(first, EventType.READ)
        handler.add_event(second, EventType.READ)
        handler.del_event(first)
        assert handler.events == (second,)
        assert second.index == 0
        pair2[1].send(b"q")
        assert _poll(handler) == [second]


@pytest.mark.parametrize("kind", KINDS)
def test_capacity_exceeded(kind, pair, pair2):
    with _make(kind, max_event=1) as handler:
        handler.add_event(Event(fd=pair[0].fileno()), EventType.READ)
        with pytest.raises(IndexError):
            handler.add_event(Event(fd=pair2[0].fileno()), EventType.READ)
        assert len(handler) == 1


@pytest.mark.parametrize("kind", KINDS)
def test_max_events_limits_result(kind, pair, pair2):
    with _make(kind) as handler:
        handler.add_event(Event(fd=pair[0].fileno()), EventType.WRITE)
        handler.add_event(Event(fd=pair2[0].fileno()), EventType.WRITE)
        for _ in range(40):
            if len(handler.get_events(100)) == 2:
                break
        assert len(handler.get_events(1)) <= 1
        assert len(_poll(handler)) == 2


def test_select_handler_keeps_fd_as_uevent(pair):
    a, _ = pair
    with _make(SelectEventHandler) as handler:
        ev = Event(fd=a.fileno())
        handler.add_event(ev, EventType.READ)
        assert ev.uevent == a.fileno()


def test_selector_handler_reuses_pool_slots(pair):
    a, _ = pair
    with _make(SelectorEventHandler, max_event=1) as handler:
        for _ in range(3):
            ev = Event(fd=a.fileno())
            handler.add_event(ev, EventType.READ)
            handler.del_event(ev)
        assert len(handler._pool) == 1
        assert len(handler) == 0


def test_selector_handler_close_clears(pair):
    a, _ = pair
    handler = _make(SelectorEventHandler)
    ev = Event(fd=a.fileno())
    handler.add_event(ev, EventType.READ)
    handler.close()
    assert len(handler) == 0
    assert ev.index == -1


def test_create_event_handler_works(pair):
    a, b = pair
    with create_event_handler(8) as handler:
        assert isinstance(handler, EventHandler)
        assert handler.max_event == 8
        assert handler.mod_name.endswith("_event")
        handler.timeout = 0.05
        ev = Event(fd=a.fileno())
        handler.add_event(ev, EventType.READ)
        b.send(b"k")
        assert _poll(handler) == [ev]
    assert len(handler) == 0