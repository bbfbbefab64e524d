"""Doubly linked list with caller-owned nodes, new nodes going in at the head."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any


class ListNode:
    """A node that can sit in one DoublyLinkedList at a time."""

    __slots__ = ("pre", "nex", "data")

    def __init__(self, data: Any = None) -> None:
        self.pre: ListNode | None = None
        self.nex: ListNode | None = None
        self.data = data

    def __repr__(self) -> str:
        return f"ListNode({self.data!r})"


class DoublyLinkedList:
    """Doubly linked list of ListNode objects."""

    def __init__(self) -> None:
        self.head: ListNode | None = None
        self.tail: ListNode | None = None
        self._num = 0

    def add(self, node: ListNode) -> None:
        """Insert node at the head."""
        node.pre = None
        if self._num == 0:
            node.nex = None
            self.head = node
            self.tail = node
        else:
            node.nex = self.head
            self.head.pre = node
            self.head = node
        self._num += 1

    def _clear(self) -> ListNode:
        node = self.head
        self.head = None
        self.tail = None
        self._num = 0
        return node

    def pop_head(self) -> ListNode | None:
        """Remove and return the head node, or None when empty."""
        if self._num == 0:
            return None
        if self._num == 1:
            node = self._clear()
        else:
            node = self.head
            self.head = node.nex
            self.head.pre = None
            self._num -= 1
        node.pre = node.nex = None
        return node

    def pop_tail(self) -> ListNode | None:
        """Remove and return the tail node, or None when empty."""
        if self._num == 0:
            return None
        if self._num == 1:
            node = self._clear()
        else:
            node = self.tail
            self.tail = node.pre
            self.tail.nex = None
            self._num -= 1
        node.pre = node.nex = None
        return node

    def move_head(self, node: ListNode) -> None:
        """Move node to the head.

        Lists of one or two nodes are left as they are, as is a node that is
        already the head.
        """
        if self._num in (1, 2):
            return
        pre_node, nex_node = node.pre, node.nex
        if pre_node is None:
            return
        if nex_node is not None:
            nex_node.pre = pre_node
        else:
            self.tail = pre_node
        pre_node.nex = nex_node
        node.nex = self.head
        self.head.pre = node
        self.head = node
        node.pre = None

    def pop(self, node: ListNode) -> None:
        """Unlink node from the list.

        Does nothing on an empty list; raises ValueError when node is not
        consistent with the list's head, tail or length.
        """
        if self._num == 0:
            return
        pre_node, nex_node = node.pre, node.nex

        if pre_node is None and nex_node is None:
            if self.head is not node or self.tail is not node or self._num != 1:
                raise ValueError("node is not the only node of this list")
            self._clear()
            return

        if pre_node is None:
            if self.head is not node or self._num == 1:
                raise ValueError("node is not the head of this list")
            nex_node.pre = None
            self.head = nex_node
        elif nex_node is None:
            if self.tail is not node or self._num == 1:
                raise ValueError("node is not the tail of this list")
            pre_node.nex = None
            self.tail = pre_node
        else:
            pre_node.nex = nex_node
            nex_node.pre = pre_node

        self._num -= 1
        node.pre = node.nex = None

    def __len__(self) -> int:
        return self._num

    def __iter__(self) -> Iterator[ListNode]:
        """Nodes from head to tail."""
        node = self.head
        while node is not None:
            nex = node.nex
            yield node
            node = nex