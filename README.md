# gnbnet

Small building blocks for network daemons. It uses only the standard library.

## Modules

- `gnbnet.murmurhash`: `murmurhash_hash(data)` is the 32-bit MurmurHash2 with seed 0.
- `gnbnet.hash32`: `Hash32Map(bucket_num)` is a chained hash map keyed by byte
  strings. A `str` key is encoded as UTF-8. Entries are `KeyValue(key, value)`.
  - `set` updates an existing entry in place and returns it, or appends a new
    entry and returns `None`.
  - `store` replaces an existing entry with a new one.
  - `get` returns the entry or `None`, and `delete` removes and returns it or
    returns `None`.
  - `items`, `keys`, `uint32_keys` and `uint64_keys` list the entries in bucket
    order and take an optional `limit`. The last two read each key as a
    little-endian integer.
- `gnbnet.address`:
  - `Address` holds a family, a port in host order, the packed IP and a
    timestamp. `ip_port_string(secure)` gives `ip:port`, `[ip:port]` or
    `NONE_ADDRESS`.
  - `AddressList(size)` has a fixed number of slots. `update` reuses the slot of
    the same IP. Otherwise it takes the first unused slot, and failing that the
    one with the oldest timestamp. `fifo` keeps a single address.
  - `SockAddress` is an endpoint with a socket type. Build one with
    `make_sockaddress4` or `make_sockaddress6`, and compare two with
    `compare_sockaddr`.
  - Formatting helpers are `address4_string`, `address6_string`,
    `socket4_string`, `socket6_string` and `hide_address_string`. With
    `secure=True` they mask the first part of the IP with `*`.
  - Other helpers are `address4_from_string`, `get_netmask_class`, `htonll`
    and `ntohll`.
- `gnbnet.daemon`:
  - `daemonize()` starts a new session when it can and ignores SIGHUP. It then
    changes to `/`, clears the umask and points stdin and stdout at `/dev/null`.
    It works on POSIX only.
  - `save_pid(path)` writes the process id.
- `gnbnet.linked_list`: `DoublyLinkedList` of caller-owned `ListNode`s. New
  nodes go in at the head. It has `pop_head`, `pop_tail`, `move_head` and
  `pop`.
- `gnbnet.fixed_list`: `FixedList(size)`, where removal moves the last item into
  the freed position.
- `gnbnet.fixed_pool`: `FixedPool(array_len, factory)` is a stack of
  preallocated blocks.
- `gnbnet.event`: `Event`, the `EventType`, `EventOp` and `FdType` flags, and the
  abstract `EventHandler`. `EventHandler` can be used as a context manager.
- `gnbnet.event_handlers`:
  - `SelectEventHandler` is built on `select()` with a 10 ms timeout.
  - `SelectorEventHandler` uses `selectors.DefaultSelector` with a 1 s timeout.
  - `create_event_handler(max_event)` picks the select one on Windows and the
    selector one elsewhere.
- `gnbnet.log`: `LogContext` writes `%`-formatted lines to several outputs:
  - the console: stdout, or stderr for errors;
  - to `std.log`, `debug.log` and `error.log` under a directory, which
    `file_rotate()` archives when the day changes;
  - over UDP, as plain text or framed binary when `udp_binary` is set.

## Examples

```python
from gnbnet.hash32 import Hash32Map

peers = Hash32Map(64)
peers.set(b"node-1", "10.0.0.1")
print(b"node-1" in peers, len(peers))   # True 1
peers.delete(b"node-1")
```

```python
from gnbnet.address import AddressList, address4_from_string

addresses = AddressList(3)
addresses.update(address4_from_string("192.168.0.10:9001"))
for address in addresses:
    print(address.ip_port_string(True))  # ***.168.0.10:9001
```

```python
import socket
from gnbnet.event import Event, EventType
from gnbnet.event_handlers import create_event_handler

left, right = socket.socketpair()
with create_event_handler(16) as handler:
    handler.add_event(Event(left.fileno(), udata=left), EventType.READ)
    right.send(b"x")
    for ready in handler.get_events():
        print(ready.udata, ready.ev_type)
```

```python
from gnbnet.log import LogConfig, LogContext, LogOutput

with LogContext() as log:
    log.output_type = LogOutput.STDOUT
    log.config_table[0] = LogConfig("core", console_level=2)
    log.log(0, 1, "hello %s\n", "world")
```

## What it does not do

gnbnet is a library only. It has no command-line program and no relay or tunnel
service. It also has no code that reads configuration files. Wiring these pieces
into a running daemon is left to the caller.

## Tests

The tests use pytest and live in `tests/`. Install the `test` extra to get pytest.