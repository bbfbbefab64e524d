"""Fixed-capacity list with O(1) removal by swapping in the last item."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class FixedListItem:
    """A slot of a FixedList: its current position and the user data."""

    idx: int = 0
    udata: Any = None


class FixedList:
    """A list of at most size items whose order is not kept on removal."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        self.size = size
        self._array = [FixedListItem(idx) for idx in range(size)]
        self._num = 0

    def push(self, udata: Any) -> FixedListItem:
        """Place udata in the next free slot and return that slot.

        Raises IndexError when the list is full.
        """
        if self._num == self.size:
            raise IndexError("fixed list is full")
        item = self._array[self._num]
        item.udata = udata
        item.idx = self._num
        self._num += 1
        return item

    def pop(self, item: FixedListItem) -> None:
        """Remove item, moving the last item into its position.

        Raises IndexError on an empty list and ValueError when item is not
        one of the list's active slots.
        """
        if self._num == 0:
            raise IndexError("pop from empty fixed list")
        idx = item.idx
        if not (0 <= idx < self._num) or self._array[idx] is not item:
            raise ValueError("item is not in this list")
        last_idx = self._num - 1
        if idx != last_idx:
            last = self._array[last_idx]
            last.idx = idx
            self._array[idx] = last
            item.idx = last_idx
            self._array[last_idx] = item
        self._num -= 1

    def __len__(self) -> int:
        return self._num

    def __iter__(self) -> Iterator[FixedListItem]:
        return iter(self._array[: self._num])