"""MurmurHash2 variant with a zero seed, as used for hash-map bucketing."""

from __future__ import annotations

import struct

_MASK32 = 0xFFFFFFFF
_M = 0x5BD1E995


def murmurhash_hash(data: bytes | bytearray | memoryview) -> int:
    """Return the 32-bit MurmurHash2 (seed 0) of a bytes-like object."""
    buf = bytes(memoryview(data))
    length = len(buf)
    h = length & _MASK32

    full = length - length % 4
    for (k,) in struct.iter_unpack("<I", buf[:full]):
        k = (k * _M) & _MASK32
        k ^= k >> 24
        k = (k * _M) & _MASK32
        h = (h * _M) & _MASK32
        h ^= k

    tail = buf[full:]
    if tail:
        if len(tail) >= 3:
            h ^= tail[2] << 16
        if len(tail) >= 2:
            h ^= tail[1] << 8
        h ^= tail[0]
        h = (h * _M) & _MASK32

    h ^= h >> 13
    h = (h * _M) & _MASK32
    h ^= h >> 15
    return h