"""IPv4/IPv6 endpoint values, address lists and their string forms."""

from __future__ import annotations

import ipaddress
import re
import socket
import sys
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import IntEnum

ADDRESS_LIFE_TIME_TS_SEC = 120

_ULONG_MAX = 2**64 - 1
_U64_MASK = 0xFFFFFFFFFFFFFFFF
_IN_CLASSA_HOST = 0x00FFFFFF
_IN_CLASSB_HOST = 0x0000FFFF
_IN_CLASSC_HOST = 0x000000FF
_STRTOUL_RE = re.compile(r"\s*([+-]?)(\d*)")


class Protocol(IntEnum):
    """Transport protocol selector for socket addresses."""

    UDP = 0x1
    TCP = 0x2


def _swap64(val: int) -> int:
    return int.from_bytes((val & _U64_MASK).to_bytes(8, "little"), "big")


def htonll(val: int) -> int:
    """Convert a 64-bit integer from host to network byte order."""
    return _swap64(val) if sys.byteorder == "little" else val & _U64_MASK


def ntohll(val: int) -> int:
    """Convert a 64-bit integer from network to host byte order."""
    return _swap64(val) if sys.byteorder == "little" else val & _U64_MASK


def get_netmask_class(addr4) -> str:
    """Classify an IPv4 address by which classful host part is all zero.

    Accepts a dotted string, four packed bytes, or the numeric address value.
    Returns 'a', 'b', 'c', or 'n' when none of the host parts is zero.
    """
    if isinstance(addr4, str):
        value = int(ipaddress.IPv4Address(addr4))
    elif isinstance(addr4, (bytes, bytearray, memoryview)):
        raw = bytes(addr4)
        if len(raw) != 4:
            raise ValueError("an IPv4 address has 4 bytes")
        value = int.from_bytes(raw, "big")
    else:
        value = int(addr4) & 0xFFFFFFFF
    if not value & _IN_CLASSA_HOST:
        return "a"
    if not value & _IN_CLASSB_HOST:
        return "b"
    if not value & _IN_CLASSC_HOST:
        return "c"
    return "n"


def _mask(text: str, start: int, stops: str) -> str:
    """Replace characters from start up to the first stop character with '*'."""
    end = start
    while end < len(text) and text[end] not in stops:
        end += 1
    return text[:start] + "*" * (end - start) + text[end:]


def _pack(family: int, host) -> bytes:
    if isinstance(host, str):
        return socket.inet_pton(family, host)
    return bytes(host)


def _ntop(family: int, host) -> str:
    return socket.inet_ntop(family, _pack(family, host))


def hide_address_string(text: str) -> str:
    """Mask the leading part of an address up to the first '.' or ':'."""
    return _mask(text, 0, ".:")


def address4_string(byte4, secure: bool = False) -> str:
    """Dotted form of a packed IPv4 address, first octet masked if secure."""
    text = socket.inet_ntop(socket.AF_INET, bytes(byte4))
    return _mask(text, 0, ".") if secure else text


def address6_string(byte16, secure: bool = False) -> str:
    """Textual form of a packed IPv6 address, first group masked if secure."""
    text = socket.inet_ntop(socket.AF_INET6, bytes(byte16))
    return _mask(text, 0, ":") if secure else text


def socket4_string(host, port: int, secure: bool = False) -> str:
    """'ip:port' for an IPv4 endpoint."""
    text = f"{_ntop(socket.AF_INET, host)}:{port & 0xFFFF}"
    return _mask(text, 0, ".") if secure else text


def socket6_string(host, port: int, secure: bool = False) -> str:
    """'[ip:port]' for an IPv6 endpoint."""
    text = f"[{_ntop(socket.AF_INET6, host)}:{port & 0xFFFF}]"
    return _mask(text, 1, ":") if secure else text


@dataclass
class Address:
    """A peer address: family, port in host order, packed IP and a timestamp."""

    type: int = 0
    port: int = 0
    addr: bytes = b""
    ts_sec: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.addr, str):
            family = self.type or (socket.AF_INET6 if ":" in self.addr else socket.AF_INET)
            self.type = family
            self.addr = socket.inet_pton(family, self.addr)
        else:
            self.addr = bytes(self.addr)

    def ip_port_string(self, secure: bool = False) -> str:
        """'ip:port', '[ip:port]' or 'NONE_ADDRESS', optionally masked."""
        start = 0
        if self.type == socket.AF_INET6:
            text = socket6_string(self.addr, self.port)
            start = 1
        elif self.type == socket.AF_INET:
            text = socket4_string(self.addr, self.port)
        else:
            text = "NONE_ADDRESS"
        return _mask(text, start, ".:") if secure else text


def _strtoul(text: str) -> int:
    match = _STRTOUL_RE.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = min(int(digits), _ULONG_MAX)
    if sign == "-" and value != _ULONG_MAX:
        value = (-value) & _ULONG_MAX
    return value


def address4_from_string(text: str) -> Address:
    """Parse 'ip:port' into an IPv4 Address.

    An out-of-range port yields an empty Address; an unparsable IP leaves the
    address bytes zero.
    """
    host, _, port_text = text.partition(":")
    value = _strtoul(port_text)
    if value == _ULONG_MAX:
        return Address()
    try:
        packed = socket.inet_pton(socket.AF_INET, host)
    except OSError:
        packed = bytes(4)
    return Address(type=socket.AF_INET, port=value & 0xFFFF, addr=packed)


class AddressList:
    """A fixed number of address slots, reusing the oldest when full."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("size must be at least 1")
        self.size = size
        self._slots: list[Address] = [Address() for _ in range(size)]
        self._num = 0

    def find(self, address: Address) -> int | None:
        """Index of the slot holding the same family and IP, or None."""
        width = {socket.AF_INET: 4, socket.AF_INET6: 16}.get(address.type)
        if width is None:
            return None
        for idx, slot in enumerate(self._slots[: self._num]):
            if slot.type == address.type and slot.addr[:width] == address.addr[:width]:
                return idx
        return None

    def free_index(self) -> int:
        """First unused slot, otherwise the last slot with the oldest timestamp."""
        free_idx = 0
        min_ts = self._slots[0].ts_sec
        for idx, slot in enumerate(self._slots):
            if slot.port == 0:
                return idx
            if slot.ts_sec <= min_ts:
                min_ts = slot.ts_sec
                free_idx = idx
        return free_idx

    def update(self, address: Address) -> None:
        """Store address in its existing slot or in a free/oldest one."""
        idx = self.find(address)
        if idx is None:
            idx = self.free_index()
        if self._slots[idx].port == 0 and self._num < self.size:
            self._num += 1
        self._slots[idx] = replace(address)

    def fifo(self, address: Address) -> None:
        """Keep only this address, in the first slot."""
        self._slots[0] = replace(address)
        self._num = 1

    def __len__(self) -> int:
        return self._num

    def __iter__(self) -> Iterator[Address]:
        return iter(self._slots[: self._num])


@dataclass
class SockAddress:
    """A socket endpoint with its family and socket type."""

    addr_type: int
    protocol: int
    addr: bytes = field(default=b"")
    port: int = 0

    @property
    def host(self) -> str:
        return socket.inet_ntop(self.addr_type, self.addr)

    @property
    def socklen(self) -> int:
        return 28 if self.addr_type == socket.AF_INET6 else 16

    @property
    def sockaddr(self) -> tuple:
        """Address tuple suitable for socket calls."""
        if self.addr_type == socket.AF_INET6:
            return (self.host, self.port, 0, 0)
        return (self.host, self.port)

    def to_string(self, secure: bool = False) -> str:
        """'ip:port' or '[ip:port]' for this endpoint."""
        if self.addr_type == socket.AF_INET6:
            return socket6_string(self.addr, self.port, secure)
        if self.addr_type == socket.AF_INET:
            return socket4_string(self.addr, self.port, secure)
        raise ValueError(f"unsupported address family {self.addr_type}")


def compare_sockaddr(first: SockAddress, second: SockAddress) -> int:
    """0 when equal, 1 when the ports differ, 2 when the addresses differ."""
    if first.port != second.port:
        return 1
    if first.addr_type != second.addr_type or first.addr != second.addr:
        return 2
    return 0


def _socket_type(protocol: int) -> int:
    return socket.SOCK_STREAM if protocol == Protocol.TCP else socket.SOCK_DGRAM


def _make(family: int, protocol: int, host: str | None, port: int) -> SockAddress:
    width = 4 if family == socket.AF_INET else 16
    packed = bytes(width)
    if host is not None:
        try:
            packed = socket.inet_pton(family, host)
        except OSError:
            pass
    return SockAddress(family, _socket_type(protocol), packed, port & 0xFFFF)


def make_sockaddress4(protocol: int, host: str | None, port: int) -> SockAddress:
    """IPv4 endpoint; a missing host means any address."""
    return _make(socket.AF_INET, protocol, host, port)


def make_sockaddress6(protocol: int, host: str | None, port: int) -> SockAddress:
    """IPv6 endpoint; a missing host means any address."""
    return _make(socket.AF_INET6, protocol, host, port)