"""Separate-chaining hash table with load-factor driven doubling."""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple

from lineage.contracts.error import BadInputError
from lineage.core.bucket import Bucket, require_key

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY: int = 16
DEFAULT_LOAD_FACTOR: float = 0.75

_UNSIGNED_MASK: int = (1 << 64) - 1


def stable_hash(key: Any) -> int:
    """Process-independent hash: a 64-bit BLAKE2b digest for text and bytes.

    Other keys fall back to their own ``__hash__``.
    """

    if isinstance(key, str):
        key = key.encode("utf-8")
    if isinstance(key, (bytes, bytearray)):
        return int.from_bytes(hashlib.blake2b(key, digest_size=8).digest(), "big")
    return hash(key)


def slot_index(hash_value: int, capacity: int) -> int:
    """Map a (possibly negative) hash code onto ``[0, capacity)``."""

    return (hash_value & _UNSIGNED_MASK) % capacity


class HashTable:
    """Hash map whose slots hold :class:`Bucket` chains.

    The table grows to twice its capacity when ``size() >= capacity * load_factor``
    at the start of a ``put``; every entry is then re-placed under the new
    capacity. Not safe for concurrent mutation.
    """

    __slots__ = ("_buckets", "_capacity", "_size", "_load_factor", "_hash_fn")

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        load_factor: float = DEFAULT_LOAD_FACTOR,
        hash_fn: Optional[Callable[[Any], int]] = None,
    ) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise BadInputError(f"capacity must be a positive integer, got {capacity!r}")
        if (
            isinstance(load_factor, bool)
            or not isinstance(load_factor, (int, float))
            or not 0.0 < load_factor <= 1.0
        ):
            raise BadInputError(f"load_factor must be in (0, 1], got {load_factor!r}")
        self._capacity = capacity
        self._load_factor = float(load_factor)
        self._hash_fn: Callable[[Any], int] = hash_fn or stable_hash
        self._buckets: List[Bucket] = [Bucket() for _ in range(capacity)]
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: Any) -> bool:
        return self.contains_key(key)

    def __iter__(self) -> Iterator[Any]:
        return self.keys()

    def __repr__(self) -> str:
        return f"HashTable(size={self._size}, capacity={self._capacity}, load_factor={self._load_factor})"

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def load_factor(self) -> float:
        """Growth threshold configured at construction."""

        return self._load_factor

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def current_load_factor(self) -> float:
        return self._size / self._capacity

    def _index(self, key: Any, capacity: Optional[int] = None) -> int:
        return slot_index(self._hash_fn(key), capacity or self._capacity)

    def _bucket_for(self, key: Any) -> Bucket:
        require_key(key)
        return self._buckets[self._index(key)]

    def _should_grow(self) -> bool:
        return self._size >= self._capacity * self._load_factor

    def _grow(self) -> None:
        new_capacity = self._capacity * 2
        fresh: List[Bucket] = [Bucket() for _ in range(new_capacity)]

        def place(key: Any, value: Any) -> None:
            fresh[self._index(key, new_capacity)].put(key, value)

        for bucket in self._buckets:
            bucket.for_each(place)
        old_capacity = self._capacity
        self._buckets, self._capacity = fresh, new_capacity
        logger.debug(
            "Resized table from %d to %d buckets (size=%d)", old_capacity, new_capacity, self._size
        )

    def put(self, key: Any, value: Any) -> bool:
        """Insert or update ``key``. Returns ``True`` when the key was not present."""

        require_key(key)
        if self._should_grow():
            self._grow()
        inserted = self._buckets[self._index(key)].put(key, value)
        if inserted:
            self._size += 1
        return inserted

    def get(self, key: Any, default: Any = None) -> Any:
        return self._bucket_for(key).get(key, default)

    def contains_key(self, key: Any) -> bool:
        return self._bucket_for(key).contains_key(key)

    def remove(self, key: Any) -> bool:
        removed = self._bucket_for(key).remove(key)
        if removed:
            self._size -= 1
        return removed

    def clear(self) -> None:
        for bucket in self._buckets:
            bucket.clear()
        self._size = 0

    def items(self) -> Iterator[Tuple[Any, Any]]:
        for bucket in self._buckets:
            yield from bucket

    def keys(self) -> Iterator[Any]:
        for key, _ in self.items():
            yield key

    def values(self) -> Iterator[Any]:
        for _, value in self.items():
            yield value

    def clone(self) -> "HashTable":
        """Return a table with independent copies of every chain."""

        copy = HashTable(self._capacity, self._load_factor, self._hash_fn)
        copy.copy_from(self)
        return copy

    def copy_from(self, source: "HashTable") -> None:
        """Replace this table's content with clones of ``source``'s chains."""

        if source is self:
            return
        self._buckets = [bucket.clone() for bucket in source._buckets]
        self._capacity = source._capacity
        self._size = source._size
        self._load_factor = source._load_factor
        self._hash_fn = source._hash_fn

    def chain_lengths(self) -> List[int]:
        return [len(bucket) for bucket in self._buckets]

    def max_chain_length(self) -> int:
        return max(self.chain_lengths(), default=0)

    def verify(self) -> List[str]:
        """Audit the table invariants; an empty list means the table is healthy."""

        problems: List[str] = []
        if len(self._buckets) != self._capacity:
            problems.append(
                f"Bucket count {len(self._buckets)} != capacity {self._capacity}"
            )
        total = 0
        for idx, bucket in enumerate(self._buckets):
            total += len(bucket)
            for key in bucket.keys():
                home = self._index(key)
                if home != idx:
                    problems.append(f"Key {key!r} stored in slot {idx}, expected {home}")
            for key in bucket.duplicate_keys():
                problems.append(f"Duplicate key {key!r} in slot {idx}")
        if total != self._size:
            problems.append(f"Size mismatch: size={self._size}, summed={total}")
        return problems


__all__ = ["DEFAULT_CAPACITY", "DEFAULT_LOAD_FACTOR", "HashTable", "slot_index", "stable_hash"]
