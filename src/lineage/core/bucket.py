"""Singly linked collision chains used by :class:`lineage.core.table.HashTable`."""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Tuple

from lineage.contracts.error import BadInputError, EmptyStructureError


def require_key(key: Any) -> None:
    """Reject ``None`` keys before they reach a chain."""

    if key is None:
        raise BadInputError("key must not be None")


class Entry:
    """Key/value pair; the key is fixed once stored, the value may be replaced."""

    __slots__ = ("_key", "value")

    def __init__(self, key: Any, value: Any) -> None:
        self._key = key
        self.value = value

    @property
    def key(self) -> Any:
        return self._key

    def __repr__(self) -> str:
        return f"Entry({self._key!r}, {self.value!r})"


class _Node:
    __slots__ = ("entry", "next")

    def __init__(self, entry: Entry, next_node: Optional["_Node"] = None) -> None:
        self.entry = entry
        self.next = next_node


class Bucket:
    """Chain of entries stored at one table slot.

    Keys are unique within a chain. New keys are pushed to the front, so
    iteration yields the most recently inserted key first.
    """

    __slots__ = ("_head", "_len")

    def __init__(self) -> None:
        self._head: Optional[_Node] = None
        self._len = 0

    def __len__(self) -> int:
        return self._len

    def __bool__(self) -> bool:
        return self._head is not None

    def __contains__(self, key: Any) -> bool:
        return self.contains_key(key)

    def __iter__(self) -> Iterator[Tuple[Any, Any]]:
        node = self._head
        while node is not None:
            yield node.entry.key, node.entry.value
            node = node.next

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k!r}: {v!r}" for k, v in self)
        return f"Bucket([{pairs}])"

    def _find(self, key: Any) -> Optional[_Node]:
        node = self._head
        while node is not None:
            if node.entry.key == key:
                return node
            node = node.next
        return None

    def put(self, key: Any, value: Any) -> bool:
        """Insert or update ``key``; return ``True`` only when a new node was linked."""

        require_key(key)
        node = self._find(key)
        if node is not None:
            node.entry.value = value
            return False
        self._head = _Node(Entry(key, value), self._head)
        self._len += 1
        return True

    def get(self, key: Any, default: Any = None) -> Any:
        require_key(key)
        node = self._find(key)
        return default if node is None else node.entry.value

    def contains_key(self, key: Any) -> bool:
        require_key(key)
        return self._find(key) is not None

    def remove(self, key: Any) -> bool:
        """Unlink the node holding ``key``. Returns whether anything was removed."""

        require_key(key)
        prev: Optional[_Node] = None
        node = self._head
        while node is not None:
            if node.entry.key == key:
                if prev is None:
                    self._head = node.next
                else:
                    prev.next = node.next
                node.next = None
                self._len -= 1
                return True
            prev, node = node, node.next
        return False

    def pop_first(self) -> Entry:
        if self._head is None:
            raise EmptyStructureError("cannot pop from an empty bucket")
        node = self._head
        self._head = node.next
        node.next = None
        self._len -= 1
        return node.entry

    def for_each(self, visitor: Callable[[Any, Any], None]) -> None:
        """Apply ``visitor(key, value)`` to every pair in chain order.

        The visitor must not mutate this bucket.
        """

        node = self._head
        while node is not None:
            visitor(node.entry.key, node.entry.value)
            node = node.next

    def clone(self) -> "Bucket":
        """Return an independent chain holding the same pairs in the same order."""

        copy = Bucket()
        tail: Optional[_Node] = None
        node = self._head
        while node is not None:
            fresh = _Node(Entry(node.entry.key, node.entry.value))
            if tail is None:
                copy._head = fresh
            else:
                tail.next = fresh
            tail = fresh
            node = node.next
        copy._len = self._len
        return copy

    def clear(self) -> None:
        self._head = None
        self._len = 0

    def keys(self) -> Iterator[Any]:
        for key, _ in self:
            yield key

    def duplicate_keys(self) -> list[Any]:
        """Keys that appear more than once in the chain (always empty when healthy)."""

        seen: list[Any] = []
        dupes: list[Any] = []
        for key in self.keys():
            if key in seen:
                if key not in dupes:
                    dupes.append(key)
            else:
                seen.append(key)
        return dupes


__all__ = ["Bucket", "Entry", "require_key"]
