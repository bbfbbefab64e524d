"""Pool of a fixed number of preallocated blocks handed out as a stack."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class FixedPool:
    """Holds array_len blocks made by factory; pop takes one, push returns one."""

    def __init__(self, array_len: int, factory: Callable[[], Any] = bytearray) -> None:
        if array_len < 0:
            raise ValueError("array_len must not be negative")
        self.array_len = array_len
        self._free = [factory() for _ in range(array_len)]

    def pop(self) -> Any:
        """Take the most recently stored block.

        Raises IndexError when the pool is empty.
        """
        if not self._free:
            raise IndexError("fixed pool is empty")
        return self._free.pop()

    def push(self, block: Any) -> int:
        """Give a block back and return the number of free blocks.

        Raises IndexError when the pool is already full.
        """
        if len(self._free) == self.array_len:
            raise IndexError("fixed pool is full")
        self._free.append(block)
        return len(self._free)

    def __len__(self) -> int:
        return len(self._free)