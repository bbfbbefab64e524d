"""Detaching the process from its terminal and recording its pid."""

from __future__ import annotations

import os
import signal
import sys


def _flush_std_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (AttributeError, ValueError, OSError):
            pass


def daemonize() -> int:
    """Detach from the controlling terminal and redirect stdin and stdout to /dev/null.

    The process starts a new session when it can, ignores SIGHUP, moves to
    the root directory and clears its umask. Returns the process id.
    Raises OSError when the system lacks sessions or /dev/null cannot be used.
    """
    if not hasattr(os, "setsid") or not hasattr(signal, "SIGHUP"):
        raise OSError("daemonize requires a POSIX system")

    try:
        os.setsid()
    except PermissionError:
        # Already a process group leader; keep the current session.
        pass

    signal.signal(signal.SIGHUP, signal.SIG_IGN)

    os.chdir("/")
    os.umask(0)

    fd = os.open(os.devnull, os.O_RDWR)
    _flush_std_streams()
    try:
        os.dup2(fd, 0)
        os.dup2(fd, 1)
    finally:
        if fd > 2:
            os.close(fd)

    return os.getpid()


def save_pid(pid_file: str | os.PathLike) -> None:
    """Write the current process id, without a newline, to pid_file."""
    with open(pid_file, "w", encoding="ascii") as fh:
        fh.write(str(os.getpid()))