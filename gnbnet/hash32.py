"""Chained hash map keyed by byte strings, bucketed with MurmurHash2."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .murmurhash import murmurhash_hash


@dataclass
class KeyValue:
    """One entry of a Hash32Map."""

    key: bytes
    value: Any


def _as_key(key: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    raise TypeError(f"key must be bytes-like or str, not {type(key).__name__}")


class Hash32Map:
    """Hash map with a fixed number of buckets, each holding a chain of entries."""

    def __init__(self, bucket_num: int) -> None:
        if bucket_num <= 0:
            raise ValueError("bucket_num must be positive")
        self.bucket_num = bucket_num
        self._buckets: list[list[KeyValue]] = [[] for _ in range(bucket_num)]
        self._kv_num = 0

    def _bucket(self, key: bytes) -> list[KeyValue]:
        return self._buckets[murmurhash_hash(key) % self.bucket_num]

    @staticmethod
    def _position(chain: list[KeyValue], key: bytes) -> int | None:
        return next((i for i, kv in enumerate(chain) if kv.key == key), None)

    def set(self, key, value) -> KeyValue | None:
        """Insert or update in place.

        Returns the existing entry when the key was already present, otherwise
        None after appending a new entry.
        """
        k = _as_key(key)
        chain = self._bucket(k)
        pos = self._position(chain, k)
        if pos is not None:
            kv = chain[pos]
            kv.value = value
            return kv
        chain.append(KeyValue(k, value))
        self._kv_num += 1
        return None

    def store(self, key, value) -> None:
        """Insert, or replace an existing entry with a fresh one."""
        k = _as_key(key)
        chain = self._bucket(k)
        pos = self._position(chain, k)
        if pos is not None:
            chain[pos] = KeyValue(k, value)
            return
        chain.append(KeyValue(k, value))
        self._kv_num += 1

    def get(self, key) -> KeyValue | None:
        """Return the entry for key, or None."""
        k = _as_key(key)
        chain = self._bucket(k)
        pos = self._position(chain, k)
        return None if pos is None else chain[pos]

    def delete(self, key) -> KeyValue | None:
        """Remove and return the entry for key, or None if absent."""
        k = _as_key(key)
        chain = self._bucket(k)
        pos = self._position(chain, k)
        if pos is None:
            return None
        self._kv_num -= 1
        return chain.pop(pos)

    def _iter_entries(self, limit: int | None) -> Iterator[KeyValue]:
        if limit is not None and limit <= 0:
            return
        count = 0
        for chain in self._buckets:
            for kv in chain:
                yield kv
                count += 1
                if limit is not None and count >= limit:
                    return

    def items(self, limit: int | None = None) -> list[KeyValue]:
        """Entries in bucket order, at most limit of them."""
        return list(self._iter_entries(limit))

    def keys(self, limit: int | None = None) -> list[bytes]:
        """Keys in bucket order, at most limit of them."""
        return [kv.key for kv in self._iter_entries(limit)]

    def uint32_keys(self, limit: int | None = None) -> list[int]:
        """Keys read as little-endian unsigned 32-bit integers."""
        return [struct.unpack_from("<I", kv.key)[0] for kv in self._iter_entries(limit)]

    def uint64_keys(self, limit: int | None = None) -> list[int]:
        """Keys read as little-endian unsigned 64-bit integers."""
        return [struct.unpack_from("<Q", kv.key)[0] for kv in self._iter_entries(limit)]

    def __len__(self) -> int:
        return self._kv_num

    def __contains__(self, key) -> bool:
        return self.get(key) is not None