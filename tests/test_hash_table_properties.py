from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from hypothesis import given, settings, strategies as st

from lineage.core import HashTable


@dataclass(frozen=True)
class CollidingKey:
    """Key whose hash intentionally collides with peers for stress testing."""

    value: int

    def __hash__(self) -> int:  # pragma: no cover - trivial wrapper
        return 0

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"CK({self.value})"


def _key_strategy() -> st.SearchStrategy[Any]:
    small_ints = st.integers(-20, 20)
    names = st.text(alphabet="abcdef ", min_size=1, max_size=6)
    colliding = st.builds(CollidingKey, st.integers(-10, 10))
    return st.one_of(small_ints, names, colliding)


def _operation_strategy() -> st.SearchStrategy[Tuple[str, Any, int | None]]:
    key = _key_strategy()
    value = st.integers(-1_000, 1_000)
    put_op = st.tuples(st.just("put"), key, value)
    get_op = st.tuples(st.just("get"), key, st.none())
    remove_op = st.tuples(st.just("remove"), key, st.none())
    return st.one_of(put_op, get_op, remove_op)


@settings(max_examples=150, deadline=None)
@given(
    st.integers(2, 8),
    st.sampled_from([0.5, 0.75, 1.0]),
    st.lists(_operation_strategy(), min_size=1, max_size=120),
)
def test_hash_table_behaves_like_dict(
    capacity: int, load_factor: float, operations: list[Tuple[str, Any, int | None]]
) -> None:
    table = HashTable(capacity=capacity, load_factor=load_factor)
    model: Dict[Any, int] = {}
    seen_keys: set[Any] = set()

    for op, key, maybe_value in operations:
        seen_keys.add(key)

        if op == "put":
            assert maybe_value is not None
            inserted = table.put(key, maybe_value)
            assert inserted is (key not in model)
            model[key] = maybe_value
        elif op == "remove":
            expected_removed = key in model
            assert table.remove(key) is expected_removed
            model.pop(key, None)
        else:  # get
            assert table.get(key) == model.get(key)

        # Count mirrors the oracle and never exceeds the growth threshold by more than one.
        assert table.size() == len(model)
        assert table.size() < table.capacity * table.load_factor + 1

        # Capacity only ever doubles from its starting point.
        ratio = table.capacity // capacity
        assert table.capacity == capacity * ratio
        assert ratio & (ratio - 1) == 0

        for candidate in seen_keys:
            assert table.get(candidate) == model.get(candidate)

        assert dict(table.items()) == model
        assert table.verify() == []


@settings(max_examples=60, deadline=None)
@given(st.dictionaries(st.integers(-500, 500), st.integers(), max_size=80))
def test_clone_matches_and_diverges(data: Dict[int, int]) -> None:
    table = HashTable(capacity=2)
    for key, value in data.items():
        table.put(key, value)
    copy = table.clone()
    assert dict(copy.items()) == data
    assert copy.capacity == table.capacity

    copy.put(10_000, 1)
    for key in list(data)[:3]:
        copy.remove(key)
    assert dict(table.items()) == data
    assert table.size() == len(data)
