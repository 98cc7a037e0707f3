"""Linked list, set and queue containers used for family-tree traversal."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Optional

from lineage.contracts.error import EmptyStructureError


class _Link:
    __slots__ = ("value", "next")

    def __init__(self, value: Any) -> None:
        self.value = value
        self.next: Optional["_Link"] = None


class NameList:
    """Singly linked list with O(1) append."""

    __slots__ = ("_head", "_tail", "_len")

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._head: Optional[_Link] = None
        self._tail: Optional[_Link] = None
        self._len = 0
        for value in values:
            self.append(value)

    def __len__(self) -> int:
        return self._len

    def __iter__(self) -> Iterator[Any]:
        link = self._head
        while link is not None:
            yield link.value
            link = link.next

    def __contains__(self, value: Any) -> bool:
        return any(item == value for item in self)

    def __getitem__(self, index: int) -> Any:
        if not 0 <= index < self._len:
            raise IndexError(f"index {index} out of range for list of length {self._len}")
        link = self._head
        for _ in range(index):
            assert link is not None
            link = link.next
        assert link is not None
        return link.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NameList):
            return NotImplemented
        return self.to_list() == other.to_list()

    def __repr__(self) -> str:
        return f"NameList({self.to_list()!r})"

    def is_empty(self) -> bool:
        return self._len == 0

    def append(self, value: Any) -> None:
        link = _Link(value)
        if self._tail is None:
            self._head = self._tail = link
        else:
            self._tail.next = link
            self._tail = link
        self._len += 1

    def remove(self, value: Any) -> bool:
        """Remove the first occurrence of ``value``."""

        prev: Optional[_Link] = None
        link = self._head
        while link is not None:
            if link.value == value:
                if prev is None:
                    self._head = link.next
                else:
                    prev.next = link.next
                if link is self._tail:
                    self._tail = prev
                self._len -= 1
                return True
            prev, link = link, link.next
        return False

    def pop_first(self) -> Any:
        if self._head is None:
            raise EmptyStructureError("cannot remove from an empty list")
        link = self._head
        self._head = link.next
        if self._head is None:
            self._tail = None
        self._len -= 1
        return link.value

    def peek_first(self) -> Any:
        if self._head is None:
            raise EmptyStructureError("list is empty")
        return self._head.value

    def clear(self) -> None:
        self._head = self._tail = None
        self._len = 0

    def to_list(self) -> List[Any]:
        return list(self)


class NameSet:
    """Insertion-ordered set backed by a :class:`NameList`."""

    __slots__ = ("_items",)

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._items = NameList()
        for value in values:
            self.add(value)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __contains__(self, value: Any) -> bool:
        return value in self._items

    def add(self, value: Any) -> bool:
        if value in self._items:
            return False
        self._items.append(value)
        return True

    def discard(self, value: Any) -> bool:
        return self._items.remove(value)

    def clear(self) -> None:
        self._items.clear()

    def is_empty(self) -> bool:
        return self._items.is_empty()

    def to_list(self) -> List[Any]:
        return self._items.to_list()


class LinkedQueue:
    """FIFO queue used for breadth-first walks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items = NameList()

    def __len__(self) -> int:
        return len(self._items)

    def enqueue(self, value: Any) -> None:
        self._items.append(value)

    def dequeue(self) -> Any:
        if self._items.is_empty():
            raise EmptyStructureError("cannot dequeue from an empty queue")
        return self._items.pop_first()

    def peek(self) -> Any:
        if self._items.is_empty():
            raise EmptyStructureError("cannot peek into an empty queue")
        return self._items.peek_first()

    def is_empty(self) -> bool:
        return self._items.is_empty()


__all__ = ["LinkedQueue", "NameList", "NameSet"]
