import re
import socket
import struct
import time

import pytest

from gnbnet.log import LogConfig, LogContext, LogLevel, LogOutput, LogType

LINE_RE = re.compile(r"^\d\d-\d\d-\d\d \d\d:\d\d:\d\d core hello 7\n$")


@pytest.fixture
def ctx():
    context = LogContext()
    context.config_table[1] = LogConfig(log_name="core", console_level=LogLevel.LEVEL2)
    yield context
    context.close()


def test_log_to_stdout_when_level_reached(ctx, capsys):
    ctx.output_type = LogOutput.STDOUT
    line = ctx.log(1, LogLevel.LEVEL2, "hello %d\n", 7)
    assert LINE_RE.match(line)
    assert capsys.readouterr().out == line


def test_log_suppressed_above_level(ctx, capsys):
    ctx.output_type = LogOutput.STDOUT
    assert ctx.log(1, LogLevel.LEVEL3, "hello %d\n", 7) is None
    assert capsys.readouterr().out == ""


def test_log_suppressed_when_output_none(ctx, capsys):
    assert ctx.log(1, LogLevel.LEVEL1, "hello %d\n", 7) is None
    assert capsys.readouterr().out == ""


def test_unset_level_enables_everything(ctx, capsys):
    ctx.output_type = LogOutput.STDOUT
    ctx.config_table[2] = LogConfig(log_name="core", udp_level=LogLevel.UNSET)
    line = ctx.debug(2, LogLevel.LEVEL3, "hello 7\n")
    assert LINE_RE.match(line)
    assert capsys.readouterr().out == line


def test_error_goes_to_stderr(ctx, capsys):
    ctx.output_type = LogOutput.STDOUT
    line = ctx.error(1, LogLevel.LEVEL1, "hello %d\n", 7)
    captured = capsys.readouterr()
    assert captured.err == line
    assert captured.out == ""


def test_overlong_line_dropped(ctx, capsys):
    ctx.output_type = LogOutput.STDOUT
    assert ctx.logf(LogType.STD, 1, LogLevel.LEVEL1, "x" * 5000) is None
    assert capsys.readouterr().out == ""


def test_file_output_per_type(ctx, tmp_path):
    ctx.output_type = LogOutput.FILE
    ctx.open_files(tmp_path)
    std_line = ctx.logf(LogType.STD, 1, LogLevel.LEVEL1, "hello %d\n", 7)
    dbg_line = ctx.logf(LogType.DEBUG, 1, LogLevel.LEVEL1, "debug line\n")
    assert (tmp_path / "std.log").read_text() == std_line
    assert (tmp_path / "debug.log").read_text() == dbg_line
    assert (tmp_path / "error.log").read_text() == ""


def test_file_rotate_archives_then_idles(ctx, tmp_path):
    ctx.output_type = LogOutput.FILE
    ctx.open_files(tmp_path)
    old = ctx.logf(LogType.STD, 1, LogLevel.LEVEL1, "before\n")
    assert ctx.file_rotate() is True
    archive = tmp_path / f"std_{time.strftime('%Y_%m_%d')}.log.arc"
    assert archive.read_text() == old
    new = ctx.logf(LogType.STD, 1, LogLevel.LEVEL1, "after\n")
    assert (tmp_path / "std.log").read_text() == new
    assert ctx.file_rotate() is False


def test_file_rotate_without_file_output(ctx):
    assert ctx.file_rotate() is False


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def test_udp_open_defaults(ctx):
    ctx.udp_open()
    assert ctx.port4 == 9000
    assert ctx.port6 == 9000
    assert ctx.addr4 == socket.inet_pton(socket.AF_INET, "127.0.0.1")


def test_udp_text_output(ctx, receiver):
    ctx.output_type = LogOutput.UDP
    ctx.udp_open()
    ctx.udp_set_addr4("127.0.0.1", receiver.getsockname()[1])
    line = ctx.logf(LogType.STD, 1, LogLevel.LEVEL1, "hello %d\n", 7)
    data, _ = receiver.recvfrom(8192)
    assert data == line.encode()


def test_udp_binary_output(ctx, receiver):
    ctx.output_type = LogOutput.UDP
    ctx.udp_binary = True
    ctx.log_payload_type = 0x42
    ctx.udp_open()
    ctx.udp_set_addr4_string(f"127.0.0.1:{receiver.getsockname()[1]}")
    line = ctx.logf(LogType.STD, 1, LogLevel.LEVEL1, "hello %d\n", 7)
    data, _ = receiver.recvfrom(8192)
    size, ptype, sub_type = struct.unpack("!HBB", data[:4])
    assert data[4:] == line.encode()
    assert size == len(data)
    assert ptype == 0x42
    assert sub_type == 1


def test_set_addr4_string(ctx):
    ctx.udp_set_addr4_string("10.1.2.3:8080")
    assert ctx.addr4 == socket.inet_pton(socket.AF_INET, "10.1.2.3")
    assert ctx.port4 == 8080


def test_set_addr4_string_too_long(ctx):
    with pytest.raises(ValueError):
        ctx.udp_set_addr4_string("255.255.255.255:65535000000000")


def test_set_addr4_invalid_ip(ctx):
    with pytest.raises(ValueError):
        ctx.udp_set_addr4("not-an-ip", 1)


def test_set_addr6(ctx):
    ctx.udp_set_addr6("::1", 7000)
    assert ctx.addr6 == socket.inet_pton(socket.AF_INET6, "::1")
    assert ctx.port6 == 7000