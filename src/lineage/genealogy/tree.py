"""Family tree indexed by normalised person names."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from lineage.contracts.error import BadInputError
from lineage.core.lists import LinkedQueue, NameList, NameSet
from lineage.core.table import DEFAULT_CAPACITY, DEFAULT_LOAD_FACTOR, HashTable

from .person import Person, base_name, normalize_name

logger = logging.getLogger(__name__)


class FamilyTree:
    """People indexed by full name and nickname in a :class:`HashTable`.

    A person is reachable under its normalised name and, when it has one, its
    normalised nickname. Both keys point at the same :class:`Person` object.
    Short names (``"rickard stark"`` for ``"rickard stark first of his name"``)
    are kept in a second table so parent references written without the
    ordinal still resolve when they are unambiguous.
    """

    def __init__(
        self,
        table: Optional[HashTable] = None,
        *,
        capacity: int = DEFAULT_CAPACITY,
        load_factor: float = DEFAULT_LOAD_FACTOR,
    ) -> None:
        self._table = table if table is not None else HashTable(capacity, load_factor)
        self._short_names = HashTable(capacity, load_factor)

    @property
    def table(self) -> HashTable:
        return self._table

    def __len__(self) -> int:
        return sum(1 for _ in self.people())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------
    def get_person(self, name: str) -> Optional[Person]:
        key = normalize_name(name)
        if not key:
            return None
        return self._table.get(key)

    def contains(self, name: str) -> bool:
        key = normalize_name(name)
        return bool(key) and self._table.contains_key(key)

    def resolve(self, name: Optional[str]) -> Optional[Person]:
        """Find a person by exact key, falling back to an unambiguous short name."""

        key = normalize_name(name)
        if not key:
            return None
        person = self._table.get(key)
        if person is not None:
            return person
        candidates: Optional[NameList] = self._short_names.get(base_name(key))
        if candidates is not None and len(candidates) == 1:
            return self._table.get(candidates[0])
        return None

    def people(self) -> Iterator[Person]:
        """Every indexed person once, ordered by key."""

        seen: set[int] = set()
        unique: List[Person] = []
        for person in self._table.values():
            if id(person) in seen:
                continue
            seen.add(id(person))
            unique.append(person)
        unique.sort(key=lambda p: p.key)
        return iter(unique)

    # ------------------------------------------------------------------
    # mutation
    # ------------------------------------------------------------------
    def add_person(self, person: Person) -> bool:
        """Index ``person``; returns ``False`` when its name or nickname is taken."""

        if not person.name or not person.name.strip():
            raise BadInputError("person name must not be empty")
        key = person.key
        nickname_key = person.nickname_key
        if self._table.contains_key(key) or (
            nickname_key is not None and self._table.contains_key(nickname_key)
        ):
            logger.debug("Duplicate person skipped: %s", person.name)
            return False

        father = self.resolve(person.father) if person.father else None
        if father is not None:
            self._merge_duplicate_child(father, person)

        self._table.put(key, person)
        if nickname_key is not None:
            self._table.put(nickname_key, person)
        self._remember_short_name(key)
        return True

    def _remember_short_name(self, key: str) -> None:
        short = base_name(key)
        if short == key:
            return
        keys: Optional[NameList] = self._short_names.get(short)
        if keys is None:
            keys = NameList()
            self._short_names.put(short, keys)
        if key not in keys:
            keys.append(key)

    def _forget_short_name(self, key: str) -> None:
        short = base_name(key)
        keys: Optional[NameList] = self._short_names.get(short)
        if keys is None:
            return
        keys.remove(key)
        if keys.is_empty():
            self._short_names.remove(short)

    def _merge_duplicate_child(self, father: Person, person: Person) -> Optional[str]:
        """Make ``person`` appear exactly once among ``father``'s children.

        Returns the child entry that was replaced, if any.
        """

        declared = NameSet(normalize_name(child) for child in father.children)
        names = NameSet([person.key])
        # A father listing the exact key names this child directly; loose
        # spellings in that list belong to siblings.
        if person.key not in declared:
            names.add(base_name(person.key))
            if person.nickname_key:
                names.add(person.nickname_key)

        replaced: Optional[str] = None
        for child in father.children.to_list():
            child_key = normalize_name(child)
            if child_key not in names:
                continue
            father.children.remove(child)
            replaced = child
            stale = self._table.get(child_key) if child_key else None
            if stale is not None and stale is not person and child_key != person.key:
                if self.resolve(stale.father) is father:
                    self.remove_person(stale.name)
                    logger.info("Removed duplicated child %s of %s", stale.name, father.name)

        father.children.append(person.key)
        return replaced

    def remove_person(self, name: str) -> bool:
        person = self.get_person(name)
        if person is None:
            return False
        key = person.key
        self._table.remove(key)
        nickname_key = person.nickname_key
        if nickname_key is not None and self._table.get(nickname_key) is person:
            self._table.remove(nickname_key)
        self._forget_short_name(key)
        father = self.resolve(person.father) if person.father else None
        if father is not None:
            father.children.remove(key)
        return True

    def remove_duplicates(self) -> int:
        """Drop keys whose person repeats an earlier person's name; returns keys removed."""

        owners: Dict[str, Person] = {}
        doomed: List[str] = []
        for key, person in sorted(self._table.items(), key=lambda kv: kv[0]):
            owner = owners.setdefault(person.key, person)
            if owner is not person:
                doomed.append(key)
        for key in doomed:
            self._table.remove(key)
            logger.info("Removed duplicate: %s", key)
        return len(doomed)

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def find_matches(self, substring: str) -> List[Person]:
        needle = (substring or "").strip().lower()
        if not needle:
            raise BadInputError("search text must not be empty")
        return [
            p
            for p in self.people()
            if needle in p.name.lower() or (p.nickname is not None and needle in p.nickname.lower())
        ]

    def title_holders(self, title: str) -> List[Person]:
        needle = (title or "").strip().lower()
        if not needle:
            raise BadInputError("title must not be empty")
        return [p for p in self.people() if p.title and needle in p.title.lower()]

    def _child_index(self) -> HashTable:
        """Father key -> NameList of child keys, from both child lists and parent links."""

        index = HashTable(max(DEFAULT_CAPACITY, self._table.capacity), self._table.load_factor)

        def link(father: Person, child: Person) -> None:
            children: Optional[NameList] = index.get(father.key)
            if children is None:
                children = NameList()
                index.put(father.key, children)
            if child.key not in children:
                children.append(child.key)

        for person in self.people():
            for child_name in person.children:
                child = self.resolve(child_name)
                if child is not None and child is not person:
                    link(person, child)
            father = self.resolve(person.father) if person.father else None
            if father is not None and father is not person:
                link(father, person)
        return index

    def children_of(self, name: str) -> List[str]:
        person = self.get_person(name)
        if person is None:
            return []
        names: List[str] = []
        for child_name in person.children:
            child = self.resolve(child_name)
            names.append(child.name if child is not None else child_name)
        return names

    def edges(self) -> List[Tuple[str, str]]:
        """``(father, child)`` name pairs between indexed people."""

        index = self._child_index()
        pairs: List[Tuple[str, str]] = []
        for father_key, children in index.items():
            father = self._table.get(father_key)
            for child_key in children:
                pairs.append((father.name, self._table.get(child_key).name))
        pairs.sort()
        return pairs

    def ancestors(self, name: str) -> List[str]:
        """Known ancestors of ``name``, nearest generation first."""

        person = self.get_person(name)
        if person is None:
            return []
        visited = NameSet([person.key])
        found: List[str] = []
        queue = LinkedQueue()
        queue.enqueue(person)
        while not queue.is_empty():
            current: Person = queue.dequeue()
            for parent_name in (current.father, current.mother):
                parent = self.resolve(parent_name) if parent_name else None
                if parent is None or not visited.add(parent.key):
                    continue
                found.append(parent.name)
                queue.enqueue(parent)
        return found

    def generations(self) -> List[List[str]]:
        """People layered by generation; roots (no indexed father) come first."""

        index = self._child_index()
        has_father = HashTable(max(DEFAULT_CAPACITY, self._table.capacity))
        for _, children in index.items():
            for child_key in children:
                has_father.put(child_key, True)

        visited = HashTable(max(DEFAULT_CAPACITY, self._table.capacity))
        queue = LinkedQueue()
        for person in self.people():
            if not has_father.contains_key(person.key):
                visited.put(person.key, True)
                queue.enqueue((person.key, 0))

        layers: List[List[str]] = []
        while not queue.is_empty():
            key, depth = queue.dequeue()
            if depth == len(layers):
                layers.append([])
            layers[depth].append(self._table.get(key).name)
            children: Optional[NameList] = index.get(key)
            for child_key in children or ():
                if visited.put(child_key, True):
                    queue.enqueue((child_key, depth + 1))
        for layer in layers:
            layer.sort()
        return layers

    def generation(self, number: int) -> List[str]:
        if isinstance(number, bool) or not isinstance(number, int) or number < 1:
            raise BadInputError(f"generation must be a positive integer, got {number!r}")
        layers = self.generations()
        if number > len(layers):
            return []
        return layers[number - 1]

    def stats(self) -> Dict[str, Any]:
        return {
            "keys": self._table.size(),
            "people": len(self),
            "capacity": self._table.capacity,
            "load_factor": self._table.load_factor,
            "current_load_factor": round(self._table.current_load_factor(), 4),
            "max_chain_length": self._table.max_chain_length(),
        }

    def verify(self) -> List[str]:
        problems = list(self._table.verify())
        for key, person in self._table.items():
            if key not in (person.key, person.nickname_key):
                problems.append(f"Key {key!r} does not name {person.name!r}")
        return problems


__all__ = ["FamilyTree"]
