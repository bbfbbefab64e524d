"""Leveled log lines written to the console, to daily rotated files and over UDP."""

from __future__ import annotations

import os
import re
import socket
import struct
import sys
import time
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from pathlib import Path
from typing import BinaryIO

LOG_LINE_MAX = 1024 * 4
LOG_ID_COUNT = 256
DEFAULT_UDP_PORT = 9000

_MAX_SOCKADDRESS_STRING = 16 + 1 + len("65535") + 1
_ULONG_MAX = 2**64 - 1
_PORT_RE = re.compile(r"\s*([+-]?)(\d*)")
# Frame header for binary UDP output: total frame size (big endian), type, sub type.
_PAYLOAD_HEADER = struct.Struct("!HBB")


class LogType(IntEnum):
    """Built-in tag of a log line; it picks the console stream and the file."""

    STD = 0
    DEBUG = 1
    ERROR = 2


class LogOutput(IntFlag):
    """Destinations a log context writes to."""

    NONE = 0x0
    STDOUT = 0x1
    FILE = 0x2
    UDP = 0x4


class LogLevel(IntEnum):
    """Verbosity; higher is more detailed, 0 outputs nothing."""

    LEVEL0 = 0
    LEVEL1 = 1
    LEVEL2 = 2
    LEVEL3 = 3
    UNSET = 0xFF


@dataclass
class LogConfig:
    """Name and per-destination levels of one log id."""

    log_name: str = ""
    console_level: int = LogLevel.LEVEL0
    file_level: int = LogLevel.LEVEL0
    udp_level: int = LogLevel.LEVEL0


_FILE_STEMS = {LogType.STD: "std", LogType.DEBUG: "debug", LogType.ERROR: "error"}


def _open_append(path: Path) -> BinaryIO:
    return open(path, "ab", buffering=0, opener=lambda p, f: os.open(p, f, 0o600))


def _parse_port(text: str) -> int:
    match = _PORT_RE.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = min(int(digits), _ULONG_MAX)
    if sign == "-" and value != _ULONG_MAX:
        value = (-value) & _ULONG_MAX
    return value


class LogContext:
    """Holds the log configuration, open log files and UDP sockets."""

    def __init__(self) -> None:
        self.output_type = LogOutput.NONE
        self.config_table = [LogConfig() for _ in range(LOG_ID_COUNT)]
        self.udp_binary = False
        self.log_payload_type = 0

        self.log_file_path: Path | None = None
        self._files: dict[LogType, BinaryIO] = {}
        self._pre_files: list[BinaryIO] = []
        self.pre_mday = 0

        self.socket4: socket.socket | None = None
        self.socket6: socket.socket | None = None
        self.addr4 = bytes(4)
        self.port4 = 0
        self.addr6 = bytes(16)
        self.port6 = 0

    def __enter__(self) -> LogContext:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def file_name(self, log_type: LogType) -> Path:
        """Path of the current log file for log_type."""
        if self.log_file_path is None:
            raise ValueError("no log file path set")
        return self.log_file_path / f"{_FILE_STEMS[LogType(log_type)]}.log"

    def logf(self, log_type: int, log_id: int, level: int, fmt: str, *args) -> str | None:
        """Format and emit one line to every enabled output.

        Returns the line, or None when it would exceed the line limit and was
        dropped. The level is not consulted here; see log, debug and error.
        """
        now = time.strftime("%y-%m-%d %H:%M:%S")
        head = f"{now} {self.config_table[log_id].log_name} "
        if len(head.encode("utf-8")) > LOG_LINE_MAX:
            return None
        line = head + (fmt % args if args else fmt)
        data = line.encode("utf-8")
        if len(data) > LOG_LINE_MAX:
            return None

        log_type = LogType(log_type)
        if self.output_type & LogOutput.STDOUT:
            self._console_output(log_type, line)
        if self.output_type & LogOutput.FILE:
            self._file_output(log_type, data)
        if self.output_type & LogOutput.UDP:
            if self.udp_binary:
                header = _PAYLOAD_HEADER.pack(len(data) + _PAYLOAD_HEADER.size,
                                              self.log_payload_type & 0xFF, log_id & 0xFF)
                self._udp_output(header + data)
            else:
                self._udp_output(data)
        return line

    def _enabled(self, log_id: int, level: int) -> bool:
        if self.output_type == LogOutput.NONE:
            return False
        config = self.config_table[log_id]
        return (config.console_level >= level or config.file_level >= level
                or config.udp_level >= level)

    def _leveled(self, log_type: LogType, log_id: int, level: int, fmt: str, args) -> str | None:
        if not self._enabled(log_id, level):
            return None
        return self.logf(log_type, log_id, level, fmt, *args)

    def log(self, log_id: int, level: int, fmt: str, *args) -> str | None:
        """Emit a STD line if any destination of log_id reaches level."""
        return self._leveled(LogType.STD, log_id, level, fmt, args)

    def debug(self, log_id: int, level: int, fmt: str, *args) -> str | None:
        """Emit a DEBUG line if any destination of log_id reaches level."""
        return self._leveled(LogType.DEBUG, log_id, level, fmt, args)

    def error(self, log_id: int, level: int, fmt: str, *args) -> str | None:
        """Emit an ERROR line if any destination of log_id reaches level."""
        return self._leveled(LogType.ERROR, log_id, level, fmt, args)

    @staticmethod
    def _console_output(log_type: LogType, line: str) -> None:
        stream = sys.stderr if log_type == LogType.ERROR else sys.stdout
        stream.write(line)
        stream.flush()

    def _file_output(self, log_type: LogType, data: bytes) -> None:
        fh = self._files.get(log_type)
        if fh is not None:
            fh.write(data)

    def _udp_output(self, payload: bytes) -> None:
        if self.socket6 is not None:
            host6 = socket.inet_ntop(socket.AF_INET6, self.addr6)
            try:
                self.socket6.sendto(payload, (host6, self.port6, 0, 0))
            except OSError:
                pass
        if self.socket4 is not None:
            host4 = socket.inet_ntop(socket.AF_INET, self.addr4)
            try:
                self.socket4.sendto(payload, (host4, self.port4))
            except OSError:
                pass

    def udp_open(self) -> None:
        """Open the UDP sockets and aim them at the loopback port 9000."""
        try:
            sock6 = socket.socket(socket.AF_INET6, socket.SOCK_DGRAM)
            try:
                sock6.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock6.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 1)
                sock6.bind(("::", 0))
            except OSError:
                pass
            self.socket6 = sock6
        except OSError:
            self.socket6 = None

        try:
            sock4 = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock4.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock4.bind(("0.0.0.0", 0))
            except OSError:
                pass
            self.socket4 = sock4
        except OSError:
            self.socket4 = None

        self.addr6 = socket.inet_pton(socket.AF_INET6, "::1")
        self.port6 = DEFAULT_UDP_PORT
        self.addr4 = socket.inet_pton(socket.AF_INET, "127.0.0.1")
        self.port4 = DEFAULT_UDP_PORT

    def udp_set_addr4(self, ip: str, port: int) -> None:
        """Send IPv4 UDP output to ip:port. Raises ValueError for a bad ip."""
        try:
            packed = socket.inet_pton(socket.AF_INET, ip)
        except OSError as exc:
            raise ValueError(f"invalid IPv4 address: {ip!r}") from exc
        self.addr4 = packed
        self.port4 = port & 0xFFFF

    def udp_set_addr6(self, ip: str, port: int) -> None:
        """Send IPv6 UDP output to ip, port. Raises ValueError for a bad ip."""
        try:
            packed = socket.inet_pton(socket.AF_INET6, ip)
        except OSError as exc:
            raise ValueError(f"invalid IPv6 address: {ip!r}") from exc
        self.addr6 = packed
        self.port6 = port & 0xFFFF

    def udp_set_addr4_string(self, text: str) -> None:
        """Set the IPv4 UDP destination from 'ip:port'.

        Raises ValueError when the text is too long, the port out of range or
        the address invalid.
        """
        if len(text) > _MAX_SOCKADDRESS_STRING:
            raise ValueError("address string too long")
        host, _, port_text = text.partition(":")
        value = _parse_port(port_text)
        if value == _ULONG_MAX:
            raise ValueError("port out of range")
        self.udp_set_addr4(host, value)

    def open_files(self, path: str | os.PathLike) -> None:
        """Open std.log, debug.log and error.log for appending under path."""
        self.log_file_path = Path(path)
        self._open_log_files()

    def _open_log_files(self) -> None:
        for log_type in LogType:
            self._files[log_type] = _open_append(self.file_name(log_type))

    def _close_pre_files(self) -> None:
        for fh in self._pre_files:
            fh.close()
        self._pre_files.clear()

    def file_rotate(self) -> bool:
        """Archive the log files when the day of month has changed.

        On the same day the files kept from the last rotation are closed and
        False is returned; False is also returned when file output is off.
        Returns True after archiving and reopening.
        """
        mday = time.localtime().tm_mday
        if mday == self.pre_mday:
            self._close_pre_files()
            return False
        if not self.output_type & LogOutput.FILE:
            return False
        if self.log_file_path is None:
            raise ValueError("no log file path set")

        self.pre_mday = mday
        stamp = time.strftime("%Y_%m_%d")
        for log_type, stem in _FILE_STEMS.items():
            archive = self.log_file_path / f"{stem}_{stamp}.log.arc"
            try:
                os.replace(self.file_name(log_type), archive)
            except OSError:
                pass
            fh = self._files.pop(log_type, None)
            if fh is not None:
                self._pre_files.append(fh)
        self._open_log_files()
        return True

    def close(self) -> None:
        """Close the log files and UDP sockets."""
        self._close_pre_files()
        for fh in self._files.values():
            fh.close()
        self._files.clear()
        for sock in (self.socket4, self.socket6):
            if sock is not None:
                sock.close()
        self.socket4 = None
        self.socket6 = None